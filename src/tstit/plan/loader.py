"""Loading, validation and discovery of test plan files."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from tstit.core.errors import PlanDiscoveryError, PlanLoadError, UnsupportedExecutor

from .models import DEFAULT_EXECUTOR, DEFAULT_METHOD, ExecutionConfig, ExpectationSpec, RequestSpec, TestPlan

logger = logging.getLogger(__name__)

ALLOWED_EXECUTORS = {"curl"}
ALLOWED_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}
TOML_SUFFIXES = {".toml"}
YAML_SUFFIXES = {".yaml", ".yml"}
PLAN_SUFFIXES = TOML_SUFFIXES | YAML_SUFFIXES


def load_plan(path: str | Path) -> TestPlan:
    """Load and validate a plan file."""
    plan_path = Path(path).expanduser()
    try:
        text = plan_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise PlanLoadError(f"Unable to read plan {plan_path}: {exc}") from exc
    raw = _parse_document(text, plan_path)
    return parse_plan(raw, source=plan_path)


def parse_plan(raw: Any, source: Optional[Path] = None) -> TestPlan:
    """Build a :class:`TestPlan` from an already deserialized document."""
    if not isinstance(raw, Mapping):
        raise PlanLoadError("Plan file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise PlanLoadError(f"Plan schema validation failed: {messages}")
    request = _parse_request(raw["in"])
    config = _parse_execution(raw.get("plan"))
    expectations = _parse_expectations(raw["out"])
    return TestPlan(input=request, plan=config, output=expectations, source=source)


def discover_plan_files(paths: Iterable[str | Path]) -> List[Path]:
    """Expand files and directories into an ordered list of plan files.

    Directories are walked recursively with entries sorted by name, so the
    order plans run in (and therefore which plan produces a variable before
    another consumes it) is stable across runs.
    """
    found: List[Path] = []
    for entry in paths:
        _collect(Path(entry), found)
    return found


def _collect(path: Path, found: List[Path]) -> None:
    if not path.exists():
        raise PlanDiscoveryError(f"Path does not exist: {path}", {"path": str(path)})
    if path.is_file():
        if path.suffix.lower() in PLAN_SUFFIXES:
            found.append(path)
        return
    if path.is_dir():
        try:
            children = sorted(path.iterdir(), key=lambda child: child.name)
        except OSError as exc:
            raise PlanDiscoveryError(f"Unable to list {path}: {exc}", {"path": str(path)}) from exc
        for child in children:
            _collect(child, found)


def _parse_document(text: str, path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix in YAML_SUFFIXES:
            return yaml.safe_load(text) or {}
        return tomllib.loads(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise PlanLoadError(f"Unable to parse plan {path}: {exc}") from exc


def _parse_request(raw: Mapping[str, Any]) -> RequestSpec:
    method = str(raw.get("method") or DEFAULT_METHOD).strip().upper()
    if method not in ALLOWED_METHODS:
        raise PlanLoadError(f"Unsupported HTTP method '{method}'")
    body = raw.get("body", raw.get("json"))
    return RequestSpec(url=raw["url"], method=method, body=body)


def _parse_execution(raw: Optional[Mapping[str, Any]]) -> ExecutionConfig:
    if not raw:
        return ExecutionConfig()
    executor = str(raw.get("executor", raw.get("exec")) or DEFAULT_EXECUTOR).strip()
    if executor not in ALLOWED_EXECUTORS:
        raise UnsupportedExecutor(executor)
    return ExecutionConfig(executor=executor)


def _parse_expectations(raw: Mapping[str, Any]) -> ExpectationSpec:
    expect = {str(key): _expected_text(value) for key, value in raw["expect"].items()}
    assign = {str(key): str(value) for key, value in (raw.get("assign") or {}).items()}
    return ExpectationSpec(expect=expect, assign=assign)


def _expected_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


_SCALAR = {"type": ["string", "number", "boolean"]}

PLAN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["in", "out"],
    "properties": {
        "in": {
            "type": "object",
            "required": ["url"],
            "properties": {
                "method": {"type": "string"},
                "url": {"type": "string"},
                "body": {"type": "string"},
                "json": {"type": "string"},
            },
        },
        "plan": {
            "type": "object",
            "properties": {
                "executor": {"type": "string"},
                "exec": {"type": "string"},
            },
        },
        "out": {
            "type": "object",
            "required": ["expect"],
            "properties": {
                "expect": {"type": "object", "additionalProperties": _SCALAR},
                "assign": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "pattern": r"^\$?[A-Za-z0-9_]+$"},
                },
            },
        },
    },
}
_validator = Draft7Validator(PLAN_SCHEMA)
