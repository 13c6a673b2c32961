"""Observable models — objects, mappings, and lists that announce changes.

Each model carries a listener registry keyed by what changed: an
attribute name for ``Observable``, a key for ``ObservableDict``, and a
single content key for ``ObservableList``. Mutations notify listeners
synchronously, before the mutating call returns.

Example::

    state = NavigationState("photos", {"photoIds": []})
    cancel = listeners_of(state.parameters["photoIds"]).add(
        CONTENT, lambda event: print("now", event.value)
    )
    state.parameters["photoIds"].append(10)   # prints "now [10]"
    cancel()
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, SupportsIndex

# Listener key for list content changes
CONTENT = "__content__"

_MISSING = object()
_SCALARS = (str, int, float, bool, bytes, type(None))


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Emitted by an observable model after a mutation.

    Attributes:
        target: The model that changed.
        key: Attribute name, mapping key, or ``CONTENT`` for lists.
        value: The new value (``None`` when a key was removed; the list
            itself for content changes).
    """

    target: object
    key: object
    value: Any


Listener = Callable[[ChangeEvent], None]


class _Subscription:
    __slots__ = ("active", "listener")

    def __init__(self, listener: Listener) -> None:
        self.listener = listener
        self.active = True


class Listeners:
    """Per-key listener registry for one observable model.

    Registration is thread-safe.  ``emit()`` dispatches over a snapshot,
    skipping listeners removed by an earlier listener in the same
    dispatch.
    """

    __slots__ = ("_by_key", "_lock")

    def __init__(self) -> None:
        # key -> subscriptions in registration order
        self._by_key: dict[object, list[_Subscription]] = {}
        self._lock = threading.Lock()

    def add(self, key: object, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *key*. Returns a remover."""
        subscription = _Subscription(listener)
        with self._lock:
            self._by_key.setdefault(key, []).append(subscription)

        def remove() -> None:
            subscription.active = False
            with self._lock:
                found = self._by_key.get(key)
                if found is not None and subscription in found:
                    found.remove(subscription)
                    if not found:
                        del self._by_key[key]

        return remove

    def count(self, key: object | None = None) -> int:
        """Number of live listeners, for one key or overall."""
        with self._lock:
            if key is not None:
                return len(self._by_key.get(key, ()))
            return sum(len(found) for found in self._by_key.values())

    def emit(self, event: ChangeEvent) -> None:
        with self._lock:
            subscriptions = list(self._by_key.get(event.key, ()))
        for subscription in subscriptions:
            if subscription.active:
                subscription.listener(event)


def listeners_of(obj: object) -> Listeners:
    """Return the listener registry of an observable model.

    Raises ``TypeError`` for objects that do not announce changes.
    """
    found = getattr(obj, "_listeners", None)
    if not isinstance(found, Listeners):
        msg = f"{type(obj).__name__} is not observable; use the waymark.reactive models"
        raise TypeError(msg)
    return found


def _unchanged(old: object, new: object) -> bool:
    if old is new:
        return True
    return isinstance(new, _SCALARS) and type(old) is type(new) and old == new


def observable(value: Any) -> Any:
    """Convert plain dicts and lists into their observable models.

    Dict values are converted too. Observable values and everything
    else pass through unchanged.
    """
    if isinstance(value, (ObservableDict, ObservableList)):
        return value
    if isinstance(value, dict):
        return ObservableDict(value)
    if isinstance(value, list):
        return ObservableList(value)
    return value


class Observable:
    """Base class whose public attribute assignments notify listeners.

    Attributes starting with ``_`` are private and never announced.
    Assigning a value equal to the current one (same object, or an equal
    scalar) is not a change.
    """

    def __init__(self) -> None:
        object.__setattr__(self, "_listeners", Listeners())

    def _coerce(self, name: str, value: Any) -> Any:
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        value = self._coerce(name, value)
        old = getattr(self, name, _MISSING)
        object.__setattr__(self, name, value)
        if not _unchanged(old, value):
            self._listeners.emit(ChangeEvent(self, name, value))


class ObservableDict(dict):
    """A dict that notifies per-key listeners on every change.

    Values are passed through ``observable()`` on the way in, so nested
    lists become ``ObservableList``.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._listeners = Listeners()
        super().__init__()
        self.update(*args, **kwargs)

    def _announce(self, key: object, value: Any) -> None:
        self._listeners.emit(ChangeEvent(self, key, value))

    def __setitem__(self, key: Any, value: Any) -> None:
        value = observable(value)
        old = self.get(key, _MISSING)
        super().__setitem__(key, value)
        if not _unchanged(old, value):
            self._announce(key, value)

    def __delitem__(self, key: Any) -> None:
        super().__delitem__(key)
        self._announce(key, None)

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def __ior__(self, other: Any) -> ObservableDict:  # type: ignore[override]
        self.update(other)
        return self

    def setdefault(self, key: Any, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    def pop(self, key: Any, *default: Any) -> Any:
        present = key in self
        value = super().pop(key, *default)
        if present:
            self._announce(key, None)
        return value

    def popitem(self) -> tuple[Any, Any]:
        key, value = super().popitem()
        self._announce(key, None)
        return key, value

    def clear(self) -> None:
        keys = list(self)
        super().clear()
        for key in keys:
            self._announce(key, None)


class ObservableList(list):
    """A list that notifies content listeners after every mutation."""

    def __init__(self, iterable: Iterable[Any] = ()) -> None:
        self._listeners = Listeners()
        super().__init__(iterable)

    def _announce(self) -> None:
        self._listeners.emit(ChangeEvent(self, CONTENT, self))

    def append(self, value: Any) -> None:
        super().append(value)
        self._announce()

    def extend(self, values: Iterable[Any]) -> None:
        super().extend(values)
        self._announce()

    def insert(self, index: SupportsIndex, value: Any) -> None:
        super().insert(index, value)
        self._announce()

    def remove(self, value: Any) -> None:
        super().remove(value)
        self._announce()

    def pop(self, index: SupportsIndex = -1) -> Any:
        value = super().pop(index)
        self._announce()
        return value

    def clear(self) -> None:
        super().clear()
        self._announce()

    def sort(self, *args: Any, **kwargs: Any) -> None:
        super().sort(*args, **kwargs)
        self._announce()

    def reverse(self) -> None:
        super().reverse()
        self._announce()

    def __setitem__(self, index: Any, value: Any) -> None:
        super().__setitem__(index, value)
        self._announce()

    def __delitem__(self, index: Any) -> None:
        super().__delitem__(index)
        self._announce()

    def __iadd__(self, values: Iterable[Any]) -> ObservableList:  # type: ignore[override]
        super().__iadd__(values)
        self._announce()
        return self

    def __imul__(self, count: SupportsIndex) -> ObservableList:  # type: ignore[override]
        super().__imul__(count)
        self._announce()
        return self


class NavigationState(Observable):
    """Live navigation state: where to go, with what, and what is left.

    ``parameters`` is always an ``ObservableDict``; assigning a plain
    dict (or ``None``) stores an observable copy.
    """

    def __init__(
        self,
        destination: str | None = None,
        parameters: dict[Any, Any] | None = None,
        remaining_path: str | None = None,
    ) -> None:
        super().__init__()
        self.destination = destination
        self.parameters = parameters
        self.remaining_path = remaining_path

    def _coerce(self, name: str, value: Any) -> Any:
        if name == "parameters":
            return ObservableDict() if value is None else observable(value)
        return value

    def __repr__(self) -> str:
        return (
            f"NavigationState(destination={self.destination!r}, "
            f"parameters={dict(self.parameters)!r}, "
            f"remaining_path={self.remaining_path!r})"
        )


class PathSlot(Observable):
    """Observable holder for a path string."""

    def __init__(self, path: str | None = None) -> None:
        super().__init__()
        self.path = path

    def __repr__(self) -> str:
        return f"PathSlot(path={self.path!r})"
