import pytest

from tstit.core.comparator import Equals, GreaterThan, LessThan, compare_values, parse_comparison
from tstit.core.errors import MalformedComparisonLiteral


def test_parse_comparison_variants() -> None:
    assert parse_comparison(">5") == GreaterThan(5)
    assert parse_comparison("<2.5") == LessThan(2.5)
    assert parse_comparison("-3") == Equals(-3)


@pytest.mark.parametrize(
    "actual, expected, outcome",
    [
        (5, ">0", True),
        (0, ">0", False),
        (-1, "<0", True),
        (0, "<0", False),
        (42, "42", True),
        (42, "43", False),
        (1.5, ">1", True),
        (2, "2.0", True),
    ],
)
def test_numeric_comparisons(actual, expected, outcome) -> None:
    assert compare_values(actual, expected) is outcome


@pytest.mark.parametrize("literal", [">abc", "<", "abc", "", "1,0", " 5"])
def test_malformed_numeric_literal_raises(literal) -> None:
    with pytest.raises(MalformedComparisonLiteral):
        compare_values(3, literal)


def test_strings_compare_exactly() -> None:
    assert compare_values("alice", "alice")
    assert not compare_values("alice", "Alice")
    assert not compare_values("5", ">1")


def test_booleans() -> None:
    assert compare_values(True, "true")
    assert compare_values(False, "false")
    assert not compare_values(True, "false")
    assert not compare_values(True, "1")
    assert not compare_values(False, "yes")


@pytest.mark.parametrize("actual", [None, [1, 2], {"a": 1}])
def test_structured_values_never_match(actual) -> None:
    assert not compare_values(actual, "null")
    assert not compare_values(actual, "[1,2]")
