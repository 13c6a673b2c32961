"""Tests for waymark.routing.route — Literal, Variable, ParseResult."""

import pytest

from waymark.routing.route import Literal, ParseResult, Variable, VariableKind


class TestVariableKind:
    def test_prefixes(self) -> None:
        assert VariableKind(":") is VariableKind.STRING
        assert VariableKind("*") is VariableKind.PATH
        assert VariableKind("+") is VariableKind.INTEGER
        assert VariableKind("...") is VariableKind.REMAINDER


class TestLiteral:
    def test_frozen(self) -> None:
        lit = Literal("/photos")
        with pytest.raises(AttributeError):
            lit.text = "/other"  # type: ignore[misc]


class TestVariable:
    def test_defaults(self) -> None:
        var = Variable(VariableKind.STRING, "name")
        assert var.slash is False
        assert var.optional is False
        assert var.plural is False
        assert var.optional_slash is False
        assert var.is_remainder is False

    def test_optional_slash_needs_slash(self) -> None:
        assert Variable(VariableKind.STRING, "n", optional=True).optional_slash is False
        assert Variable(VariableKind.STRING, "n", slash=True, optional=True).optional_slash is True
        assert Variable(VariableKind.STRING, "n", slash=True, plural=True).optional_slash is True

    def test_required_slash_is_not_optional(self) -> None:
        assert Variable(VariableKind.INTEGER, "n", slash=True).optional_slash is False

    def test_positional_name(self) -> None:
        assert Variable(VariableKind.STRING, 0).name == 0

    def test_frozen(self) -> None:
        var = Variable(VariableKind.STRING, "name")
        with pytest.raises(AttributeError):
            var.name = "other"  # type: ignore[misc]


class TestParseResult:
    def test_defaults(self) -> None:
        result = ParseResult(destination="home")
        assert result.parameters == {}
        assert result.remaining_path is None

    def test_equality(self) -> None:
        assert ParseResult("a", {"x": 1}) == ParseResult("a", {"x": 1})
        assert ParseResult("a", {"x": 1}) != ParseResult("a", {"x": 2})

    def test_frozen(self) -> None:
        result = ParseResult(destination="home")
        with pytest.raises(AttributeError):
            result.destination = "away"  # type: ignore[misc]
