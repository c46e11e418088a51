"""JSON reporter emitting structured execution results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict, Optional

import click
from jsonschema import validate

from tstit.core.results import PlanResult, RunSummary

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results as JSON validated against the report schema.

    Without a path the payload is echoed to stdout.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = pathlib.Path(path) if path else None
        self._records: list[Dict[str, Any]] = []

    def on_start(self, total: int) -> None:
        self._records.clear()

    def on_plan_result(self, result: PlanResult, index: int, total: int) -> None:
        self._records.append(_result_to_dict(result))

    def on_complete(self, summary: RunSummary) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "summary": {
                "total": summary.total,
                "passed": summary.passed,
                "failed": summary.failed,
                "duration_s": summary.duration_s,
            },
            "plans": self._records,
        }
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        text = json.dumps(payload, indent=2)
        if self._path is None:
            click.echo(text)
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}")


def _result_to_dict(result: PlanResult) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": result.identifier,
        "status": result.status,
        "state": result.state.value,
        "duration_ms": result.duration_s * 1000,
        "assigned": dict(result.assigned),
    }
    if result.error is not None:
        error = result.error.to_dict()
        error["details"] = _jsonify(error["details"])
        error["stage"] = result.failed_stage.value if result.failed_stage else None
        record["error"] = error
    return record


def _jsonify(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _jsonify(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
