from __future__ import annotations

import json
import sys
import textwrap
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from tstit.core.executors import ExecutorManager, ExecutorOutput, PreparedRequest, RequestExecutor
from tstit.core.settings import EngineSettings

BASE_URL = "http://api.test"

_FAKE_CURL = textwrap.dedent(
    """
    import json
    import pathlib
    import sys

    here = pathlib.Path(__file__).parent
    args = sys.argv[1:]
    with open(here / "calls.jsonl", "a", encoding="utf-8") as handle:
        handle.write(json.dumps(args) + "\\n")
    method = args[args.index("-X") + 1]
    url = args[-1]
    responses = json.loads((here / "responses.json").read_text(encoding="utf-8"))
    entry = responses.get(method + " " + url)
    if entry is None:
        sys.stderr.write("curl: (7) no canned response for " + method + " " + url + "\\n")
        sys.exit(7)
    if "stdout_hex" in entry:
        sys.stdout.flush()
        sys.stdout.buffer.write(bytes.fromhex(entry["stdout_hex"]))
    else:
        sys.stdout.write(entry["stdout"])
    sys.stderr.write(entry.get("stderr", ""))
    sys.exit(entry.get("exit", 0))
    """
)


class FakeCurl:
    """Python stand-in for ``curl`` answering from canned responses."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.script = root / "fake_curl.py"
        self.script.write_text(_FAKE_CURL, encoding="utf-8")
        self._responses: Dict[str, Dict[str, object]] = {}
        self._save()

    @property
    def command(self) -> tuple[str, ...]:
        return (sys.executable, str(self.script))

    def respond(self, method: str, path: str, stdout: object, *, exit: int = 0, stderr: str = "") -> None:
        if isinstance(stdout, bytes):
            entry: Dict[str, object] = {"stdout_hex": stdout.hex()}
        else:
            entry = {"stdout": stdout if isinstance(stdout, str) else json.dumps(stdout)}
        entry.update({"exit": exit, "stderr": stderr})
        self._responses[f"{method} {BASE_URL}{path}"] = entry
        self._save()

    def calls(self) -> List[List[str]]:
        log = self.root / "calls.jsonl"
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines() if line]

    def settings(self, token: Optional[str] = None) -> EngineSettings:
        return EngineSettings(base_url=BASE_URL, token=token, curl_command=self.command)

    def _save(self) -> None:
        (self.root / "responses.json").write_text(json.dumps(self._responses), encoding="utf-8")


class StubExecutor(RequestExecutor):
    """Executor returning queued outputs and recording requests."""

    name = "stub"

    def __init__(self, settings: EngineSettings) -> None:
        super().__init__(settings)
        self.requests: List[PreparedRequest] = []
        self.outputs: List[ExecutorOutput] = []

    def queue(self, stdout: object, *, returncode: int = 0, stderr: str = "") -> None:
        text = stdout if isinstance(stdout, str) else json.dumps(stdout)
        self.outputs.append(ExecutorOutput(argv=("stub",), returncode=returncode, stdout=text, stderr=stderr))

    def run(self, request: PreparedRequest) -> ExecutorOutput:
        self.requests.append(request)
        return self.outputs.pop(0)


@pytest.fixture
def fake_curl(tmp_path: Path) -> FakeCurl:
    return FakeCurl(tmp_path / "fake_curl")


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(base_url=BASE_URL)


@pytest.fixture
def stub_executor(settings: EngineSettings) -> StubExecutor:
    return StubExecutor(settings)


@pytest.fixture
def stub_manager(stub_executor: StubExecutor) -> ExecutorManager:
    manager = ExecutorManager()
    manager.register("curl", lambda _settings: stub_executor)
    return manager
