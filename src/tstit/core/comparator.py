"""Typed comparison of response values against expected literals."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from .errors import MalformedComparisonLiteral

logger = logging.getLogger(__name__)

Number = Union[int, float]

_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class Equals:
    value: Number

    def matches(self, actual: Number) -> bool:
        return actual == self.value


@dataclass(frozen=True)
class GreaterThan:
    value: Number

    def matches(self, actual: Number) -> bool:
        return actual > self.value


@dataclass(frozen=True)
class LessThan:
    value: Number

    def matches(self, actual: Number) -> bool:
        return actual < self.value


Comparison = Union[Equals, GreaterThan, LessThan]


def parse_number(literal: str) -> Number:
    if not _NUMBER_RE.fullmatch(literal):
        raise MalformedComparisonLiteral(literal)
    try:
        return int(literal)
    except ValueError:
        return float(literal)


def parse_comparison(expected: str) -> Comparison:
    """Parse ``>k``, ``<k`` or ``k`` into a comparison variant."""

    if expected.startswith(">"):
        return GreaterThan(parse_number(expected[1:]))
    if expected.startswith("<"):
        return LessThan(parse_number(expected[1:]))
    return Equals(parse_number(expected))


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare_values(actual: Any, expected: str) -> bool:
    """Return whether ``actual`` satisfies ``expected``.

    Numbers honour ``>``/``<`` prefixes, strings must match exactly and
    booleans accept ``"true"``/``"false"``. Arrays, objects and null never
    match. A malformed numeric literal raises instead of returning False.
    """

    logger.debug("compare_values: %r and %r", actual, expected)
    if isinstance(actual, bool):
        if expected == "true":
            return actual
        if expected == "false":
            return not actual
        return False
    if is_number(actual):
        return parse_comparison(expected).matches(actual)
    if isinstance(actual, str):
        return actual == expected
    return False
