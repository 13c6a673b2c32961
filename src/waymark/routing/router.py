"""Route table — ordered parse and destination-keyed stringify.

Routes are compiled once at construction into two immutable indices:
an ordered tuple for parsing (first match wins) and a destination map
for generation (last registered wins).
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from waymark.config import RouterConfig
from waymark.errors import UnknownDestination
from waymark.routing.params import encode_plural
from waymark.routing.pattern import CompiledRoute, compile_pattern
from waymark.routing.route import Literal, ParamKey, ParseResult, Variable

if TYPE_CHECKING:
    from waymark.reactive.observers import Observers, Scope
    from waymark.routing.link import PathLink

logger = logging.getLogger("waymark.routing")

_MISSING = object()


def _state_field(state: Any, name: str) -> Any:
    """Read a state field from an object or a plain mapping."""
    if isinstance(state, Mapping):
        return state.get(name)
    return getattr(state, name, None)


class RouteTable:
    """Compiled route table.

    Usage::

        table = RouteTable("/", {
            "photos/+photoIds&": "photos",
            "photo/+photoId": "photo",
            "notes/:noteId?": "notes",
        })
        table.parse("/photos/10&20")
        # -> ParseResult("photos", {"photoIds": [10, 20]})
        table.stringify(ParseResult("notes", {"noteId": 0}))
        # -> "/notes/0"
    """

    __slots__ = ("_by_destination", "_routes", "_terms", "case_insensitive", "prefix")

    def __init__(
        self,
        prefix: str,
        routes: Mapping[str, str],
        case_insensitive: bool = False,
    ) -> None:
        self.prefix = prefix
        self.case_insensitive = case_insensitive

        ordered: list[CompiledRoute] = []
        by_destination: dict[str, list[CompiledRoute]] = {}
        terms: dict[str, dict[ParamKey, Variable]] = {}

        for pattern, destination in routes.items():
            route = compile_pattern(
                prefix + pattern,
                destination,
                case_insensitive=case_insensitive,
            )
            ordered.append(route)
            by_destination.setdefault(destination, []).append(route)
            # Union over every route for the destination; a later route's
            # variable replaces an earlier one of the same name.
            tracked = terms.setdefault(destination, {})
            for variable in route.variables:
                if not variable.is_remainder:
                    tracked[variable.name] = variable

        self._routes = tuple(ordered)
        self._by_destination = MappingProxyType(
            {dest: tuple(found) for dest, found in by_destination.items()}
        )
        self._terms = MappingProxyType(
            {dest: MappingProxyType(found) for dest, found in terms.items()}
        )
        logger.debug(
            "Compiled %d routes for %d destinations (prefix=%r)",
            len(self._routes),
            len(self._by_destination),
            prefix,
        )

    @classmethod
    def from_config(cls, routes: Mapping[str, str], config: RouterConfig) -> "RouteTable":
        """Build a table using a ``RouterConfig``."""
        return cls(config.prefix, routes, config.case_insensitive)

    @property
    def routes(self) -> tuple[CompiledRoute, ...]:
        """All compiled routes in parse priority order."""
        return self._routes

    @property
    def destinations(self) -> tuple[str, ...]:
        """Every registered destination, in first-registration order."""
        return tuple(self._by_destination)

    def routes_for(self, destination: str) -> tuple[CompiledRoute, ...]:
        """Routes registered for *destination*, in registration order.

        Raises ``UnknownDestination`` if there are none.
        """
        found = self._by_destination.get(destination)
        if not found:
            raise UnknownDestination(destination)
        return found

    def terms_for(self, destination: str) -> Mapping[ParamKey, Variable] | None:
        """Variables that affect the path generated for *destination*.

        Returns ``None`` for an unknown destination.
        """
        return self._terms.get(destination)

    def parse(self, path: str) -> ParseResult | None:
        """Match *path* against routes in declaration order.

        Returns the first match, or ``None`` when the path is unroutable.
        """
        for route in self._routes:
            result = route.match(path)
            if result is not None:
                return result
        logger.debug("No route matches %r", path)
        return None

    def stringify(self, state: Any) -> str:
        """Generate the path for a state.

        *state* is anything with ``destination``, ``parameters`` and
        ``remaining_path`` (attributes or mapping keys). The most recently
        registered route for the destination generates the path; earlier
        ones only serve as alternate parse matches.

        Raises ``UnknownDestination`` if the destination has no routes.
        """
        destination = _state_field(state, "destination")
        route = self.routes_for(destination)[-1]
        parameters = _state_field(state, "parameters")

        parts: list[str] = []
        for term in route.terms:
            if isinstance(term, Literal):
                parts.append(term.text)
                continue
            if term.is_remainder:
                continue

            value = _MISSING if parameters is None else parameters.get(term.name, _MISSING)
            if value is not _MISSING and value is not None:
                if term.slash:
                    parts.append("/")
                if term.plural:
                    parts.append(encode_plural(value))
                else:
                    parts.append(str(value))
            elif term.plural and term.optional_slash:
                parts.append("/")

        remaining_path = _state_field(state, "remaining_path")
        if remaining_path is not None:
            parts.append(remaining_path)
        return "".join(parts)

    def link_two_way(
        self,
        slot: Any,
        state: Any,
        scope: "Scope | None" = None,
        *,
        observers: "Observers | None" = None,
        attribute: str = "path",
    ) -> "PathLink":
        """Keep ``slot.<attribute>`` and *state* synchronized.

        Returns the open ``PathLink``; call it to release every
        subscription.
        """
        from waymark.routing.link import PathLink

        return PathLink(
            self,
            slot,
            state,
            observers=observers,
            scope=scope,
            attribute=attribute,
        ).open()

    def __repr__(self) -> str:
        return f"RouteTable(prefix={self.prefix!r}, routes={len(self._routes)})"


def compile_routes(
    prefix: str,
    routes: Mapping[str, str],
    case_insensitive: bool = False,
) -> RouteTable:
    """Compile a ``{pattern: destination}`` mapping into a route table."""
    return RouteTable(prefix, routes, case_insensitive)
