"""Observation capability — subscribe to property and content changes.

The path link only talks to the ``Observers`` protocol, so it can run
against any reactive layer (or a test fake).  ``ModelObservers`` is the
implementation for the bundled observable models.

Callbacks may return a ``Cancel``.  It is treated as a nested
subscription: invoked before the callback runs again, and when the
outer subscription is cancelled.  This is how subscriptions that depend
on the current value (a parameter's collection, a destination's
parameters) are rebuilt whenever that value changes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from waymark.reactive.observable import (
    CONTENT,
    ChangeEvent,
    ObservableDict,
    ObservableList,
    listeners_of,
)

Cancel: TypeAlias = Callable[[], None]
PropertyCallback: TypeAlias = Callable[[Any], "Cancel | None"]
ContentCallback: TypeAlias = Callable[[], "Cancel | None"]


@dataclass(frozen=True, slots=True)
class Scope:
    """Ownership context threaded through nested subscriptions.

    Opaque to the observers; ``nest()`` records which value a nested
    subscription was made for.
    """

    value: Any = None
    parent: Scope | None = None

    def nest(self, value: Any) -> Scope:
        return Scope(value, self)


class Observers(Protocol):
    """What the path link needs from a reactive layer."""

    def observe_property(
        self,
        obj: Any,
        name: Any,
        callback: PropertyCallback,
        scope: Scope | None = None,
    ) -> Cancel:
        """Call ``callback(value)`` now and after every change of ``obj[name]``."""
        ...

    def observe_content_change(
        self,
        collection: Any,
        callback: ContentCallback,
        scope: Scope | None = None,
    ) -> Cancel:
        """Call ``callback()`` after every mutation of *collection*."""
        ...


class _Nested:
    """Holds the cancel handle returned by the latest callback run."""

    __slots__ = ("_cancel", "_generation")

    def __init__(self) -> None:
        self._cancel: Cancel | None = None
        self._generation = 0

    def run(self, callback: Callable[..., Cancel | None], *args: Any) -> None:
        self.cancel()
        self._generation += 1
        generation = self._generation
        result = callback(*args)
        if generation != self._generation:
            # A re-entrant change already ran the callback again
            if result is not None:
                result()
            return
        self._cancel = result

    def cancel(self) -> None:
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()


def _read(obj: Any, name: Any) -> Any:
    if isinstance(obj, ObservableDict):
        return obj.get(name)
    return getattr(obj, name, None)


class ModelObservers:
    """``Observers`` for ``Observable``, ``ObservableDict`` and ``ObservableList``."""

    __slots__ = ()

    def observe_property(
        self,
        obj: Any,
        name: Any,
        callback: PropertyCallback,
        scope: Scope | None = None,
    ) -> Cancel:
        nested = _Nested()
        if obj is None:
            # Nothing to watch: report the absent value once
            nested.run(callback, None)
            return nested.cancel

        listeners = listeners_of(obj)

        def changed(event: ChangeEvent) -> None:
            nested.run(callback, event.value)

        remove = listeners.add(name, changed)
        nested.run(callback, _read(obj, name))

        def cancel() -> None:
            remove()
            nested.cancel()

        return cancel

    def observe_content_change(
        self,
        collection: Any,
        callback: ContentCallback,
        scope: Scope | None = None,
    ) -> Cancel:
        if not isinstance(collection, ObservableList):
            msg = f"{type(collection).__name__} does not announce content changes; use ObservableList"
            raise TypeError(msg)

        nested = _Nested()

        def changed(event: ChangeEvent) -> None:
            nested.run(callback)

        remove = listeners_of(collection).add(CONTENT, changed)

        def cancel() -> None:
            remove()
            nested.cancel()

        return cancel


DEFAULT_OBSERVERS: Observers = ModelObservers()
