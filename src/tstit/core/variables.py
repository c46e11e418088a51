"""Variable store and ``$NAME`` substitution."""
from __future__ import annotations

import logging
import os
import re
from typing import Dict, Mapping, Optional

from .errors import UnresolvedVariable

logger = logging.getLogger(__name__)

SIGIL = "$"
TOKEN_PATTERN = re.compile(r"\$[A-Za-z0-9_]+")


def strip_sigil(name: str) -> str:
    return name.lstrip(SIGIL)


class VariableStore:
    """Two-layer variable mapping shared by every plan of a run.

    The environment layer is a private snapshot of the process environment,
    keyed without sigil and consulted first. The overlay holds assignments keyed
    exactly as declared in the plan. ``assign`` writes both layers so that a new
    value shadows whatever the snapshot held. ``os.environ`` is only touched
    when ``export`` is set.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, *, export: bool = False) -> None:
        self._environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self._overlay: Dict[str, str] = {}
        self._export = export

    def lookup(self, token: str) -> Optional[str]:
        key = strip_sigil(token)
        if key in self._environ:
            return self._environ[key]
        return self._overlay.get(token)

    def resolve(self, token: str) -> str:
        value = self.lookup(token)
        if value is None:
            raise UnresolvedVariable(token)
        return value

    def assign(self, name: str, value: str) -> None:
        key = strip_sigil(name)
        self._environ[key] = value
        self._overlay[name] = value
        if self._export:
            os.environ[key] = value

    def assigned(self) -> Dict[str, str]:
        return dict(self._overlay)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.lookup(token) is not None


def substitute(text: str, store: VariableStore) -> str:
    """Replace every ``$NAME`` token in ``text`` with its value from ``store``.

    Replacement is a single pass: substituted values are never scanned again.
    Raises :class:`UnresolvedVariable` on the first token with no value.
    """

    def _replace(match: "re.Match[str]") -> str:
        return store.resolve(match.group(0))

    result = TOKEN_PATTERN.sub(_replace, text)
    if result != text:
        logger.debug("substituted %r -> %r", text, result)
    return result
