"""Two-way link between a path slot and a live navigation state.

A path change re-parses into the state; a change to the state's
destination, parameters, remaining path, any parameter the destination's
routes use, or the contents of a plural parameter's collection
re-stringifies into the path.

The link is a two-state machine around a single guard: while one
direction propagates, changes it causes on the other side rebuild
subscriptions but never propagate back.  Without the guard
``path -> state -> path`` would recurse synchronously.
"""

import logging
import weakref
from collections.abc import Mapping
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

from waymark.errors import UnknownDestination
from waymark.reactive.observers import DEFAULT_OBSERVERS, Cancel, Observers, Scope
from waymark.routing.route import ParamKey, Variable

if TYPE_CHECKING:
    from waymark.routing.router import RouteTable

logger = logging.getLogger("waymark.link")


class Propagation(Enum):
    """What the link is currently doing."""

    IDLE = "idle"
    FROM_PATH = "from_path"
    FROM_STATE = "from_state"


def _cancel_all(cancels: list[Cancel]) -> Cancel:
    def cancel() -> None:
        for each in reversed(cancels):
            each()
        cancels.clear()

    return cancel


class PathLink:
    """Live two-way binding between ``slot.<attribute>`` and a state.

    The link holds only a weak reference to the state.  It is its own
    cancel handle: calling it releases every subscription.

    Usage::

        slot = PathSlot("/photos/10")
        state = NavigationState()
        link = table.link_two_way(slot, state)
        state.destination               # "photos"
        state.parameters["photoIds"].append(20)
        slot.path                       # "/photos/10&20"
        link()                          # stop synchronizing
    """

    __slots__ = (
        "_attribute",
        "_cancels",
        "_closed",
        "_observers",
        "_opening",
        "_propagation",
        "_rebuilding",
        "_scope",
        "_slot",
        "_state_ref",
        "table",
    )

    def __init__(
        self,
        table: "RouteTable",
        slot: Any,
        state: Any,
        *,
        observers: Observers | None = None,
        scope: Scope | None = None,
        attribute: str = "path",
    ) -> None:
        self.table = table
        self._slot = slot
        self._attribute = attribute
        self._state_ref = weakref.ref(state)
        self._observers = observers if observers is not None else DEFAULT_OBSERVERS
        self._scope = scope if scope is not None else Scope(self)
        self._propagation = Propagation.IDLE
        self._rebuilding = False
        self._cancels: list[Cancel] = []
        self._closed = False
        self._opening = False

    @property
    def propagation(self) -> Propagation:
        """Which direction is propagating right now."""
        return self._propagation

    @property
    def closed(self) -> bool:
        """True once the link has been cancelled."""
        return self._closed

    @property
    def state(self) -> Any:
        """The linked state, or ``None`` once it has been collected."""
        return self._state_ref()

    def open(self) -> "PathLink":
        """Install the path and state subscriptions.

        The path is read first: a path already present wins, then the
        state writes back its canonical form.
        """
        if self._closed:
            msg = "Cannot reopen a cancelled link."
            raise RuntimeError(msg)
        state = self.state
        observers = self._observers
        self._cancels.append(
            observers.observe_property(self._slot, self._attribute, self._path_changed, self._scope)
        )
        if state is not None:
            self._opening = True
            try:
                self._cancels.append(
                    observers.observe_property(
                        state, "parameters", self._parameters_changed, self._scope.nest(state)
                    )
                )
            finally:
                self._opening = False
        return self

    def cancel(self) -> None:
        """Release every subscription. Idempotent."""
        if self._closed:
            return
        self._closed = True
        _cancel_all(self._cancels)()
        logger.debug("Link to %r released", self._slot)

    __call__ = cancel

    # -- path -> state ---------------------------------------------------

    def _path_changed(self, path: str | None) -> None:
        if path is None or self._propagation is not Propagation.IDLE or self._closed:
            return
        state = self.state
        if state is None:
            return

        self._propagation = Propagation.FROM_PATH
        try:
            result = self.table.parse(path)
            if result is None:
                state.destination = None
                state.parameters = {}
                state.remaining_path = None
            else:
                state.destination = result.destination
                state.parameters = result.parameters
                state.remaining_path = result.remaining_path
            logger.debug("Path %r -> %r", path, state)
        finally:
            self._propagation = Propagation.IDLE

    # -- state -> path ---------------------------------------------------

    # Callbacks below reach the state through the weak reference only: they
    # are stored in the state's own listener registries.

    def _parameters_changed(self, parameters: Any) -> Cancel:
        return self._observers.observe_property(
            self.state,
            "remaining_path",
            partial(self._remaining_path_changed, parameters),
            self._scope.nest(parameters),
        )

    def _remaining_path_changed(self, parameters: Any, _remaining_path: str | None) -> Cancel:
        return self._observers.observe_property(
            self.state,
            "destination",
            partial(self._destination_changed, parameters),
            self._scope.nest(parameters),
        )

    def _destination_changed(self, parameters: Any, destination: str | None) -> Cancel | None:
        if destination is None and self._opening:
            # An unroutable path read on open stays as it was typed
            return None
        terms: Mapping[ParamKey, Variable] | None = self.table.terms_for(destination)
        if terms is None:
            self._state_changed()
            return None

        cancels: list[Cancel] = []
        scope = self._scope.nest(destination)
        # Subscribing calls back immediately; emit once after the rebuild
        self._rebuilding = True
        try:
            for name, variable in terms.items():
                cancels.append(
                    self._observers.observe_property(
                        parameters,
                        name,
                        partial(self._parameter_changed, variable, scope),
                        scope,
                    )
                )
        finally:
            self._rebuilding = False
        self._state_changed()
        return _cancel_all(cancels)

    def _parameter_changed(self, variable: Variable, scope: Scope, value: Any) -> Cancel | None:
        cancel = None
        if variable.plural and value is not None:
            try:
                cancel = self._observers.observe_content_change(value, self._state_changed, scope.nest(value))
            except TypeError:
                # Tuples and other fixed collections have no contents to watch
                logger.debug("Not watching the contents of %r", value)
        if not self._rebuilding:
            self._state_changed()
        return cancel

    def _state_changed(self) -> None:
        if self._propagation is not Propagation.IDLE or self._closed:
            return
        state = self.state
        if state is None:
            return

        try:
            path = self.table.stringify(state)
        except UnknownDestination as exc:
            logger.debug("%s; clearing the path", exc)
            path = None

        self._propagation = Propagation.FROM_STATE
        try:
            setattr(self._slot, self._attribute, path)
        finally:
            self._propagation = Propagation.IDLE

    def __repr__(self) -> str:
        status = "closed" if self._closed else self._propagation.value
        return f"PathLink({self._slot!r}, {self.state!r}, {status})"
