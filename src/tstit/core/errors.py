"""Error hierarchy for plan loading, dispatch and validation.

Every error carries a ``kind`` (the class name) so reports can classify
failures without isinstance checks. ``EngineError`` subclasses are plan-local:
they end the current plan and the batch moves on. ``ConfigurationError`` and
``PlanDiscoveryError`` are fatal for the whole run.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional


class TstitError(Exception):
    """Base class for all tstit errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "details": dict(self.details),
        }


class ConfigurationError(TstitError):
    """Process-wide configuration is missing or invalid."""


class PlanDiscoveryError(TstitError):
    """Plan paths could not be walked."""


class EngineError(TstitError):
    """Failure that terminates a single plan."""


class PlanLoadError(EngineError):
    """A plan file could not be read, parsed or validated."""


class UnsupportedExecutor(EngineError):
    def __init__(self, executor: str) -> None:
        super().__init__(f"unsupported {executor!r} executor", {"executor": executor})
        self.executor = executor


class DispatchFailed(EngineError):
    """The executor process could not be spawned or exited nonzero."""

    def __init__(self, message: str, *, returncode: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message, {"returncode": returncode, "stderr": stderr})
        self.returncode = returncode
        self.stderr = stderr


class EmptyResponse(EngineError):
    def __init__(self, stderr: str = "") -> None:
        message = "empty response, is service down?"
        if stderr:
            message = f"{message} ({stderr})"
        super().__init__(message, {"stderr": stderr})


class MalformedResponse(EngineError):
    """The raw output is not a JSON object."""


class MissingEnvelopeField(EngineError):
    def __init__(self, field: str) -> None:
        super().__init__(f"required envelope field '{field}' is missing or not an integer", {"field": field})
        self.field = field


class ApplicationError(EngineError):
    """The service answered with a nonzero ``code``."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"API error {code}: {message}", {"code": code, "data": message})
        self.code = code
        self.error_message = message


class MissingExpectedField(EngineError):
    def __init__(self, field: str) -> None:
        super().__init__(f"required field '{field}' is missing", {"field": field})
        self.field = field


class FieldMismatch(EngineError):
    def __init__(self, field: str, expected: str, actual: Any) -> None:
        super().__init__(
            f"field '{field}' expected '{expected}' but got '{render_value(actual)}'",
            {"field": field, "expected": expected, "actual": render_value(actual)},
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class UnresolvedVariable(EngineError):
    def __init__(self, token: str) -> None:
        super().__init__(f"variable {token} not found", {"token": token})
        self.token = token


class MalformedComparisonLiteral(EngineError):
    def __init__(self, literal: str) -> None:
        super().__init__(f"expected value '{literal}' is not a valid number", {"literal": literal})
        self.literal = literal


def render_value(value: Any) -> str:
    """Text form of a JSON value; strings are returned without quotes."""

    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))
