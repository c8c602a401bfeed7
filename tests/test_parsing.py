"""Tests for variation value parsing."""

from __future__ import annotations

import pytest

from flagcore import FlagKind, MalformedValueError
from flagcore.parsing import parse_bool, parse_json, parse_number, parse_string, parse_value


class TestParseBool:
    """Tests for boolean parsing."""

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("TRUE", True), ("False", False), ("false", False)])
    def test_valid(self, raw: str, expected: bool) -> None:
        """Test that true/false parse regardless of case."""
        assert parse_bool(raw) is expected

    @pytest.mark.parametrize("raw", ["yes", "1", "", "truthy"])
    def test_invalid(self, raw: str) -> None:
        """Test that anything else is malformed."""
        with pytest.raises(MalformedValueError):
            parse_bool(raw)


class TestParseNumber:
    """Tests for number parsing."""

    @pytest.mark.parametrize(("raw", "expected"), [("42", 42.0), ("-1.5", -1.5), ("1e3", 1000.0)])
    def test_valid(self, raw: str, expected: float) -> None:
        """Test decimal and scientific notation."""
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", ["forty-two", "", "nan", "inf", "-Infinity"])
    def test_invalid(self, raw: str) -> None:
        """Test that non-numbers and non-finite values are malformed."""
        with pytest.raises(MalformedValueError):
            parse_number(raw)


class TestParseJson:
    """Tests for JSON parsing."""

    def test_object(self) -> None:
        """Test parsing an object."""
        assert parse_json('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_array(self) -> None:
        """Test parsing an array."""
        assert parse_json("[1, 2, 3]") == [1, 2, 3]

    @pytest.mark.parametrize("raw", ["42", '"text"', "null", "{broken"])
    def test_invalid(self, raw: str) -> None:
        """Test that scalars and invalid documents are malformed."""
        with pytest.raises(MalformedValueError):
            parse_json(raw)


class TestParseValue:
    """Tests for kind dispatch."""

    def test_string_passthrough(self) -> None:
        """Test that strings are returned unchanged."""
        assert parse_string(" spaced ") == " spaced "
        assert parse_value(FlagKind.STRING, "blue") == "blue"

    def test_dispatch(self) -> None:
        """Test dispatching by kind."""
        assert parse_value(FlagKind.BOOLEAN, "true") is True
        assert parse_value(FlagKind.NUMBER, "3") == 3.0
        assert parse_value(FlagKind.JSON, "{}") == {}

    def test_error_code(self) -> None:
        """Test that malformed values carry the parse error code."""
        with pytest.raises(MalformedValueError) as exc_info:
            parse_value(FlagKind.BOOLEAN, "maybe")

        assert exc_info.value.error_code.value == "PARSE_ERROR"
