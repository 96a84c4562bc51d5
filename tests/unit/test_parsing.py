"""Unit tests for shared runtime and config parsing helpers."""

import pytest

from hebrew_palindromes.parsing import (
    normalize_optional_string,
    parse_non_negative_float,
    parse_permissive_boolean,
    parse_positive_int,
    parse_required_boolean,
)


def test_normalize_optional_string_handles_blank_values() -> None:
    """Normalization should return `None` for `None` and blank textual values."""

    assert normalize_optional_string(None) is None
    assert normalize_optional_string("") is None
    assert normalize_optional_string("   ") is None
    assert normalize_optional_string("  value  ") == "value"
    assert normalize_optional_string(42) == "42"


@pytest.mark.parametrize(
    ("token", "expected"),
    [("TrUe", True), ("  ON ", True), ("YeS", True), ("FALSE", False), (" oFf ", False), ("nO", False)],
)
def test_parse_permissive_boolean_accepts_mixed_case_tokens(
    token: str, expected: bool
) -> None:
    """Permissive parsing should accept valid tokens case-insensitively."""

    assert parse_permissive_boolean(token) is expected


@pytest.mark.parametrize("value", ["", "   ", "maybe", "2", object()])
def test_parse_permissive_boolean_returns_none_for_invalid_tokens(value: object) -> None:
    """Permissive parsing should return `None` for invalid or blank inputs."""

    assert parse_permissive_boolean(value) is None


def test_parse_required_boolean_raises_for_invalid_token() -> None:
    """Strict boolean parsing should name the field in its error."""

    assert parse_required_boolean("yes", "identify_sources") is True
    with pytest.raises(
        ValueError,
        match=(
            r"`identify_sources` must be a boolean value "
            r"\(`true`/`false`, `1`/`0`, `yes`/`no`\)\."
        ),
    ):
        parse_required_boolean("sometimes", "identify_sources")


@pytest.mark.parametrize(("value", "expected"), [(3, 3), (" 12 ", 12), ("1", 1)])
def test_parse_positive_int_accepts_ints_and_numeric_strings(value: object, expected: int) -> None:
    """Positive integers should parse from ints and trimmed strings."""

    assert parse_positive_int(value, "min_length") == expected


@pytest.mark.parametrize("value", [0, -4, "0", "abc", "", True, "2.5"])
def test_parse_positive_int_rejects_invalid_values(value: object) -> None:
    """Non-positive, boolean, and non-numeric values should be rejected."""

    with pytest.raises(ValueError, match="`min_length` must be a positive integer"):
        parse_positive_int(value, "min_length")


def test_parse_non_negative_float_bounds() -> None:
    """Floats should accept zero and reject negatives, NaN, and infinity."""

    assert parse_non_negative_float("0", "temperature") == 0.0
    assert parse_non_negative_float(1, "temperature") == 1.0
    for value in (-0.1, "nan", "inf", False):
        with pytest.raises(ValueError, match="`temperature` must be a non-negative number"):
            parse_non_negative_float(value, "temperature")
