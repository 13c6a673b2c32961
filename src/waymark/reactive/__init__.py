"""Reactive layer — observable models and the observation capability.

Usage::

    from waymark.reactive import DEFAULT_OBSERVERS, NavigationState

    state = NavigationState("photos", {"photoIds": []})
    cancel = DEFAULT_OBSERVERS.observe_property(
        state, "destination", lambda destination: print("at", destination)
    )
    state.destination = "photo"   # prints "at photo"
    cancel()
"""

from waymark.reactive.observable import (
    CONTENT,
    ChangeEvent,
    Listeners,
    NavigationState,
    Observable,
    ObservableDict,
    ObservableList,
    PathSlot,
    listeners_of,
    observable,
)
from waymark.reactive.observers import (
    DEFAULT_OBSERVERS,
    Cancel,
    ModelObservers,
    Observers,
    Scope,
)

__all__ = [
    "CONTENT",
    "DEFAULT_OBSERVERS",
    "Cancel",
    "ChangeEvent",
    "Listeners",
    "ModelObservers",
    "NavigationState",
    "Observable",
    "ObservableDict",
    "ObservableList",
    "Observers",
    "PathSlot",
    "Scope",
    "listeners_of",
    "observable",
]
