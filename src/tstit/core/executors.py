"""Request executors that shell out to an external HTTP client."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .errors import DispatchFailed, EmptyResponse, MalformedResponse, UnsupportedExecutor
from .settings import EngineSettings

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "Content-Type:application/json"


@dataclass(frozen=True)
class PreparedRequest:
    """A request whose URL and body have already been substituted."""

    method: str
    url: str
    body: Optional[str] = None


@dataclass(frozen=True)
class ExecutorOutput:
    argv: Sequence[str]
    returncode: int
    stdout: str
    stderr: str


class RequestExecutor:
    """Base interface for request executors."""

    name: str = ""

    def __init__(self, settings: EngineSettings) -> None:
        self.base_url = settings.base_url
        self.token = settings.token

    def run(self, request: PreparedRequest) -> ExecutorOutput:
        raise NotImplementedError

    def dispatch(self, request: PreparedRequest) -> str:
        """Run ``request`` and return its raw response body.

        Empty output is reported before the exit status is looked at.
        """

        output = self.run(request)
        logger.debug("command completed with %s, raw response: %s", output.returncode, output.stdout)
        if not output.stdout:
            raise EmptyResponse(output.stderr.strip())
        if output.returncode != 0:
            stderr = output.stderr.strip()
            logger.error("command failed: %s", stderr)
            raise DispatchFailed(
                f"command failed with status {output.returncode}: {stderr}",
                returncode=output.returncode,
                stderr=stderr,
            )
        return output.stdout


class CurlExecutor(RequestExecutor):
    """Issues the request with a ``curl`` process."""

    name = "curl"

    def __init__(self, settings: EngineSettings) -> None:
        super().__init__(settings)
        self.command = tuple(settings.curl_command)

    def build_argv(self, request: PreparedRequest) -> List[str]:
        argv = list(self.command)
        argv += ["-sS", "-X", request.method, "-H", CONTENT_TYPE_HEADER]
        if self.token:
            argv += ["-H", f"Authorization:{self.token}"]
        if request.body is not None:
            argv += ["-d", request.body]
        argv.append(f"{self.base_url}{request.url}")
        return argv

    def run(self, request: PreparedRequest) -> ExecutorOutput:
        argv = self.build_argv(request)
        logger.debug("executing command: %s", " ".join(_masked(argv, self.token)))
        try:
            process = subprocess.run(argv, capture_output=True)
        except OSError as exc:
            raise DispatchFailed(f"failed to start {argv[0]}: {exc}") from exc
        return ExecutorOutput(
            argv=tuple(argv),
            returncode=process.returncode,
            stdout=_decode_body(process.stdout),
            stderr=process.stderr.decode("utf-8", errors="replace"),
        )


ExecutorFactory = Callable[[EngineSettings], RequestExecutor]


class ExecutorManager:
    """Registry of executor factories keyed by name."""

    def __init__(self) -> None:
        self._factories: Dict[str, ExecutorFactory] = {}

    def register(self, name: str, factory: ExecutorFactory) -> None:
        if name in self._factories:
            raise ValueError(f"Executor '{name}' already registered")
        self._factories[name] = factory

    def create(self, name: str, settings: EngineSettings) -> RequestExecutor:
        factory = self._factories.get(name)
        if factory is None:
            raise UnsupportedExecutor(name)
        return factory(settings)

    def names(self) -> Iterable[str]:
        return tuple(self._factories)


def _decode_body(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedResponse(
            f"response is not valid UTF-8: {exc}",
            {"raw": raw.decode("utf-8", errors="replace")},
        ) from exc


def _masked(argv: Sequence[str], token: Optional[str]) -> List[str]:
    if not token:
        return list(argv)
    return [part.replace(token, "***") for part in argv]


executor_manager = ExecutorManager()
executor_manager.register(CurlExecutor.name, CurlExecutor)
