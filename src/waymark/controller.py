"""RouteController — an observable ``path``/``state`` pair with its own table.

The controller reacts to every change that affects routing: replacing
``routes`` (but not mutating it in place), ``prefix`` and
``case_insensitive`` rebuild the table; replacing ``state`` re-links;
``path`` and ``state`` stay synchronized through the table's
``PathLink``.

Controllers nest: a parent whose route ends with ``...`` can drive a
child controller's ``path`` from its ``state.remaining_path``::

    app = RouteController({"docs/...": "docs", "": "home"}, prefix="/")
    docs = RouteController({"/:page": "page"})
    app.bind_remaining_path(docs)

    app.path = "/docs/intro"
    docs.state.parameters["page"]   # "intro"
"""

import logging
from collections.abc import Mapping
from typing import Any

from waymark.errors import ConfigurationError
from waymark.reactive.observable import NavigationState, Observable
from waymark.reactive.observers import DEFAULT_OBSERVERS, Cancel, Observers, Scope
from waymark.routing.link import PathLink
from waymark.routing.router import RouteTable

logger = logging.getLogger("waymark.controller")

_TABLE_ATTRIBUTES = ("routes", "prefix", "case_insensitive")


class RouteController(Observable):
    """Two-way binding between ``path`` and ``state`` through a route table.

    Attributes:
        routes: ``{pattern: destination}`` mapping, or ``None``.
        prefix: Prepended to every pattern.
        case_insensitive: Match paths ignoring case.
        path: The routed path string.
        state: ``NavigationState`` with ``destination``, ``parameters``
            and ``remaining_path``.
    """

    def __init__(
        self,
        routes: Mapping[str, str] | None = None,
        *,
        prefix: str = "",
        case_insensitive: bool = False,
        path: str | None = None,
        state: NavigationState | None = None,
        observers: Observers | None = None,
    ) -> None:
        super().__init__()
        self._observers = observers if observers is not None else DEFAULT_OBSERVERS
        self._router: RouteTable | None = None
        self._link: PathLink | None = None
        self._ready = False

        self.routes = routes
        self.prefix = prefix
        self.case_insensitive = case_insensitive
        self.path = path
        self.state = state

        self._cancels: list[Cancel] = [
            self._observers.observe_property(self, name, self._table_changed)
            for name in _TABLE_ATTRIBUTES
        ]
        self._cancels.append(self._observers.observe_property(self, "state", self._state_replaced))
        self._ready = True
        self._rebuild()

    @property
    def router(self) -> RouteTable | None:
        """The current route table, or ``None`` while unconfigured."""
        return self._router

    @property
    def link(self) -> PathLink | None:
        return self._link

    def _table_changed(self, _value: Any) -> None:
        if self._ready:
            self._rebuild()

    def _coerce(self, name: str, value: Any) -> Any:
        if name == "state" and value is None:
            return NavigationState()
        return value

    def _state_replaced(self, _state: Any) -> None:
        if self._ready:
            self._relink()

    def _rebuild(self) -> None:
        self._unlink()
        if self.routes is None or self.prefix is None or self.case_insensitive is None:
            self._router = None
            return
        if not isinstance(self.routes, Mapping):
            msg = f"routes must map patterns to destinations, got {type(self.routes).__name__}"
            raise ConfigurationError(msg)
        self._router = RouteTable(self.prefix, self.routes, self.case_insensitive)
        logger.debug("Rebuilt %r", self._router)
        self._relink()

    def _unlink(self) -> None:
        if self._link is not None:
            self._link.cancel()
            self._link = None

    def _relink(self) -> None:
        self._unlink()
        if self._router is None:
            return
        self._link = self._router.link_two_way(
            self,
            self.state,
            Scope(self),
            observers=self._observers,
        )

    def bind_remaining_path(self, child: "RouteController") -> Cancel:
        """Keep ``child.path`` and ``self.state.remaining_path`` in step.

        Follows ``state`` replacement.  Returns a cancel handle; the
        binding is also released by ``close()``.
        """
        observers = self._observers
        binding = {"active": False}

        def copy(source: Any, attribute: str, target: Any, target_attribute: str) -> None:
            if binding["active"]:
                return
            binding["active"] = True
            try:
                setattr(target, target_attribute, getattr(source, attribute))
            finally:
                binding["active"] = False

        def state_replaced(state: Any) -> Cancel:
            down = observers.observe_property(
                state,
                "remaining_path",
                lambda _value: copy(state, "remaining_path", child, "path"),
            )
            up = observers.observe_property(
                child,
                "path",
                lambda _value: copy(child, "path", state, "remaining_path"),
            )

            def cancel() -> None:
                up()
                down()

            return cancel

        cancel = observers.observe_property(self, "state", state_replaced)
        self._cancels.append(cancel)
        return cancel

    def close(self) -> None:
        """Release the link and every subscription the controller holds."""
        self._unlink()
        while self._cancels:
            self._cancels.pop()()
        self._ready = False

    def __repr__(self) -> str:
        return f"RouteController(path={self.path!r}, state={self.state!r})"
