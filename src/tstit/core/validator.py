"""Validation of the ``{code, data}`` response envelope."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from .comparator import compare_values
from .errors import (
    ApplicationError,
    FieldMismatch,
    MalformedResponse,
    MissingEnvelopeField,
    MissingExpectedField,
    render_value,
)
from .variables import VariableStore, substitute

logger = logging.getLogger(__name__)

CODE_FIELD = "code"
DATA_FIELD = "data"


def parse_envelope(raw: str) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"response is not valid JSON: {exc}", {"raw": raw}) from exc
    if not isinstance(payload, dict):
        raise MalformedResponse("response is not a JSON object", {"raw": raw})
    return payload


def check_code(envelope: Mapping[str, Any]) -> None:
    code = envelope.get(CODE_FIELD)
    if not isinstance(code, int) or isinstance(code, bool):
        raise MissingEnvelopeField(CODE_FIELD)
    if code != 0:
        if DATA_FIELD in envelope:
            message = render_value(envelope[DATA_FIELD])
        else:
            message = "unknown error"
        raise ApplicationError(code, message)


def validate_envelope(
    envelope: Mapping[str, Any],
    expect: Mapping[str, str],
    store: VariableStore,
) -> None:
    """Check ``expect`` against a parsed envelope; raise on the first failure."""

    check_code(envelope)

    if DATA_FIELD in expect:
        if DATA_FIELD not in envelope:
            raise MissingExpectedField(DATA_FIELD)
        _check_field(DATA_FIELD, envelope[DATA_FIELD], expect[DATA_FIELD], store)
        if len(expect) == 1:
            logger.info("validation successful")
            return

    data = envelope.get(DATA_FIELD)
    target: Mapping[str, Any] = data if isinstance(data, dict) else envelope

    for key, expected in expect.items():
        if key in (CODE_FIELD, DATA_FIELD):
            continue
        if key not in target:
            raise MissingExpectedField(key)
        _check_field(key, target[key], expected, store)

    logger.info("validation successful")


def validate_response(raw: str, expect: Mapping[str, str], store: VariableStore) -> Dict[str, Any]:
    """Parse ``raw`` and validate it, returning the envelope for assignment."""

    envelope = parse_envelope(raw)
    validate_envelope(envelope, expect, store)
    return envelope


def _check_field(key: str, actual: Any, expected: str, store: VariableStore) -> None:
    resolved = substitute(expected, store)
    if not compare_values(actual, resolved):
        raise FieldMismatch(key, resolved, actual)
