"""Process-wide configuration read from the environment."""
from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .errors import ConfigurationError

BASE_URL_ENV = "TSTIT_URL"
TOKEN_ENV = "TSTIT_TKN"
CURL_ENV = "TSTIT_CURL"

DEFAULT_CURL_COMMAND = ("curl",)


@dataclass(frozen=True)
class EngineSettings:
    base_url: str
    token: Optional[str] = None
    curl_command: Sequence[str] = DEFAULT_CURL_COMMAND
    export_variables: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        export_variables: bool = False,
    ) -> "EngineSettings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        base_url = env.get(BASE_URL_ENV, "").strip()
        if not base_url:
            raise ConfigurationError(f"{BASE_URL_ENV} env var is not set!", {"variable": BASE_URL_ENV})
        token = env.get(TOKEN_ENV) or None
        curl_raw = env.get(CURL_ENV, "").strip()
        curl_command = tuple(shlex.split(curl_raw)) if curl_raw else DEFAULT_CURL_COMMAND
        return cls(
            base_url=base_url,
            token=token,
            curl_command=curl_command,
            export_variables=export_variables,
        )
