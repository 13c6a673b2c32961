"""Tests for waymark.routing.router — compiled route table."""

import pytest

from waymark.config import RouterConfig
from waymark.errors import UnknownDestination
from waymark.reactive import NavigationState
from waymark.routing.route import ParseResult, VariableKind
from waymark.routing.router import RouteTable, compile_routes

ROUTES = {
    "photos/+photoIds&": "photos",
    "photos.:format": "photo-format",
    "photo/+photoId": "photo",
    "photo/+photoId/comments/+commentId": "photo-comment",
    "notes/:noteId?": "notes",
    "notes/:noteId?/detail": "notes-detail",
    "a/:/b/:": "ab",
    "::": "colon",
}


def _table() -> RouteTable:
    return RouteTable("/", ROUTES)


class TestConstruction:
    def test_routes_in_declaration_order(self) -> None:
        table = _table()
        assert [r.destination for r in table.routes] == list(ROUTES.values())

    def test_prefix_prepended(self) -> None:
        table = _table()
        assert table.routes[0].pattern == "/photos/+photoIds&"

    def test_destinations(self) -> None:
        table = RouteTable("/", {"a": "x", "b": "y", "c": "x"})
        assert table.destinations == ("x", "y")

    def test_routes_for_keeps_registration_order(self) -> None:
        table = RouteTable("/", {"a": "x", "b": "y", "c": "x"})
        assert [r.pattern for r in table.routes_for("x")] == ["/a", "/c"]

    def test_routes_for_unknown(self) -> None:
        with pytest.raises(UnknownDestination):
            _table().routes_for("nowhere")

    def test_compile_routes(self) -> None:
        table = compile_routes("/", ROUTES)
        assert isinstance(table, RouteTable)
        assert table.prefix == "/"
        assert table.case_insensitive is False

    def test_from_config(self) -> None:
        table = RouteTable.from_config({"Notes": "notes"}, RouterConfig(prefix="/app/", case_insensitive=True))
        assert table.prefix == "/app/"
        assert table.parse("/APP/notes").destination == "notes"

    def test_repr(self) -> None:
        assert repr(_table()) == "RouteTable(prefix='/', routes=8)"


class TestTermsFor:
    def test_union_across_routes(self) -> None:
        table = RouteTable("/", {"x/:a": "x", "x/:a/:b": "x"})
        assert set(table.terms_for("x")) == {"a", "b"}

    def test_plural_term(self) -> None:
        terms = _table().terms_for("photos")
        assert terms["photoIds"].plural is True
        assert terms["photoIds"].kind is VariableKind.INTEGER

    def test_positional_terms(self) -> None:
        assert set(_table().terms_for("ab")) == {0, 1}

    def test_no_variables(self) -> None:
        assert dict(_table().terms_for("colon")) == {}

    def test_remainder_not_tracked(self) -> None:
        table = RouteTable("/", {"docs/...": "docs"})
        assert dict(table.terms_for("docs")) == {}

    def test_unknown_destination(self) -> None:
        assert _table().terms_for("nowhere") is None

    def test_read_only(self) -> None:
        terms = _table().terms_for("photo")
        with pytest.raises(TypeError):
            terms["other"] = None  # type: ignore[index]


class TestParse:
    def test_comment_over_photo(self) -> None:
        result = _table().parse("/photo/10/comments/20")
        assert result == ParseResult(
            destination="photo-comment",
            parameters={"photoId": 10, "commentId": 20},
            remaining_path=None,
        )

    def test_format_over_plural(self) -> None:
        result = _table().parse("/photos.html")
        assert result == ParseResult(
            destination="photo-format",
            parameters={"format": "html"},
        )

    def test_plural_without_slash(self) -> None:
        assert _table().parse("/photos").parameters["photoIds"] == []

    def test_plural_with_slash(self) -> None:
        assert _table().parse("/photos/").parameters["photoIds"] == []

    def test_plural_one(self) -> None:
        assert _table().parse("/photos/10").parameters["photoIds"] == [10]

    def test_plural_two(self) -> None:
        assert _table().parse("/photos/10&20").parameters["photoIds"] == [10, 20]

    def test_plural_three(self) -> None:
        result = _table().parse("/photos/10&20&30")
        assert result == ParseResult(
            destination="photos",
            parameters={"photoIds": [10, 20, 30]},
        )

    def test_escaped_colon(self) -> None:
        result = _table().parse("/:")
        assert result == ParseResult(destination="colon", parameters={})

    def test_positional_parameters(self) -> None:
        result = _table().parse("/a/x/b/y")
        assert result.destination == "ab"
        assert result.parameters == {0: "x", 1: "y"}

    def test_first_match_wins(self) -> None:
        table = RouteTable("/", {"notes/:noteId?": "notes", "notes/:noteId": "note"})
        assert table.parse("/notes/3").destination == "notes"

    def test_declaration_order_not_specificity(self) -> None:
        table = RouteTable("/", {"*rest": "anything", "photo/+photoId": "photo"})
        assert table.parse("/photo/1").destination == "anything"

    def test_no_match_returns_none(self) -> None:
        assert _table().parse("/nowhere/at/all") is None

    def test_integer_rejects_letters(self) -> None:
        assert _table().parse("/photo/abc") is None

    def test_case_sensitive_by_default(self) -> None:
        assert _table().parse("/PHOTO/1") is None

    def test_case_insensitive(self) -> None:
        table = RouteTable("/", ROUTES, case_insensitive=True)
        assert table.parse("/PHOTO/1").destination == "photo"

    def test_remaining_path(self) -> None:
        table = RouteTable("/", {"docs/...": "docs"})
        result = table.parse("/docs/guide/intro")
        assert result.destination == "docs"
        assert result.remaining_path == "/guide/intro"
        assert result.parameters == {}

    def test_empty_remaining_path(self) -> None:
        table = RouteTable("/", {"docs/...": "docs"})
        assert table.parse("/docs").remaining_path == ""

    def test_fresh_result_per_call(self) -> None:
        table = _table()
        first = table.parse("/photos/1")
        second = table.parse("/photos/1")
        assert first == second
        assert first.parameters is not second.parameters

    @pytest.mark.parametrize("path", ["/photo/5\n", "/photos/1&2\n", "/:\n"])
    def test_trailing_newline_does_not_match(self, path: str) -> None:
        assert _table().parse(path) is None

    def test_only_ascii_digits_are_integers(self) -> None:
        table = _table()
        assert table.parse("/photo/\N{ARABIC-INDIC DIGIT THREE}") is None
        assert table.parse("/photos/1&\N{FULLWIDTH DIGIT TWO}") is None


class TestStringify:
    def test_comment_with_zero(self) -> None:
        path = _table().stringify(
            ParseResult(destination="photo-comment", parameters={"photoId": 11, "commentId": 0})
        )
        assert path == "/photo/11/comments/0"

    def test_optional_absent(self) -> None:
        assert _table().stringify({"destination": "notes", "parameters": {}}) == "/notes"

    def test_optional_zero(self) -> None:
        assert _table().stringify({"destination": "notes", "parameters": {"noteId": 0}}) == "/notes/0"

    def test_optional_empty_string_is_present(self) -> None:
        assert _table().stringify({"destination": "notes", "parameters": {"noteId": ""}}) == "/notes/"

    def test_optional_none_is_absent(self) -> None:
        assert _table().stringify({"destination": "notes", "parameters": {"noteId": None}}) == "/notes"

    def test_optional_in_middle_absent(self) -> None:
        assert _table().stringify({"destination": "notes-detail", "parameters": {}}) == "/notes/detail"

    def test_optional_in_middle_present(self) -> None:
        path = _table().stringify({"destination": "notes-detail", "parameters": {"noteId": 0}})
        assert path == "/notes/0/detail"

    def test_plural(self) -> None:
        path = _table().stringify({"destination": "photos", "parameters": {"photoIds": [10, 20, 30]}})
        assert path == "/photos/10&20&30"

    def test_plural_empty(self) -> None:
        assert _table().stringify({"destination": "photos", "parameters": {"photoIds": []}}) == "/photos/"

    def test_plural_absent_keeps_slash(self) -> None:
        assert _table().stringify({"destination": "photos", "parameters": {}}) == "/photos/"

    def test_plural_elements_percent_encoded(self) -> None:
        table = RouteTable("/", {"tags/:tags&": "tags"})
        path = table.stringify({"destination": "tags", "parameters": {"tags": ["a&b", "c d", "é"]}})
        assert path == "/tags/a%26b&c%20d&%C3%A9"

    def test_singular_not_encoded(self) -> None:
        table = RouteTable("/", {"files/*path": "file"})
        path = table.stringify({"destination": "file", "parameters": {"path": "a b/c"}})
        assert path == "/files/a b/c"

    def test_literal_route(self) -> None:
        assert _table().stringify({"destination": "colon", "parameters": {}}) == "/:"

    def test_positional_parameters(self) -> None:
        path = _table().stringify({"destination": "ab", "parameters": {0: "x", 1: "y"}})
        assert path == "/a/x/b/y"

    def test_none_parameters(self) -> None:
        assert _table().stringify({"destination": "notes", "parameters": None}) == "/notes"

    def test_remaining_path_appended(self) -> None:
        table = RouteTable("/", {"docs/...": "docs"})
        state = {"destination": "docs", "parameters": {}, "remaining_path": "/guide/intro"}
        assert table.stringify(state) == "/docs/guide/intro"

    def test_remaining_path_without_remainder_route(self) -> None:
        state = {"destination": "notes", "parameters": {}, "remaining_path": "/tail"}
        assert _table().stringify(state) == "/notes/tail"

    def test_last_registered_route_generates(self) -> None:
        table = RouteTable("/", {"old/:id": "item", "items/:id": "item"})
        assert table.stringify({"destination": "item", "parameters": {"id": "7"}}) == "/items/7"
        # The earlier pattern still parses
        assert table.parse("/old/7").destination == "item"

    def test_navigation_state(self) -> None:
        state = NavigationState("photo", {"photoId": 5})
        assert _table().stringify(state) == "/photo/5"

    def test_unknown_destination(self) -> None:
        with pytest.raises(UnknownDestination) as exc_info:
            _table().stringify({"destination": "nowhere", "parameters": {}})
        assert exc_info.value.destination == "nowhere"
        assert "nowhere" in str(exc_info.value)

    def test_missing_destination(self) -> None:
        with pytest.raises(UnknownDestination):
            _table().stringify({"parameters": {}})


class TestRoundTrip:
    @pytest.mark.parametrize(
        ("destination", "parameters"),
        [
            ("photos", {"photoIds": [1, 2, 3]}),
            ("photos", {"photoIds": []}),
            ("photo", {"photoId": 0}),
            ("photo-comment", {"photoId": 4, "commentId": 2}),
            ("photo-format", {"format": "json"}),
            ("notes", {"noteId": "abc"}),
            ("ab", {0: "left", 1: "right"}),
            ("colon", {}),
        ],
    )
    def test_parse_of_stringify(self, destination: str, parameters: dict) -> None:
        table = _table()
        path = table.stringify({"destination": destination, "parameters": parameters})
        assert table.parse(path) == ParseResult(destination=destination, parameters=parameters)

    def test_plural_strings_with_delimiters(self) -> None:
        table = RouteTable("/", {"tags/*tags&": "tags"})
        parameters = {"tags": ["a&b", "c/d", "100%"]}
        path = table.stringify({"destination": "tags", "parameters": parameters})
        assert table.parse(path).parameters == parameters
