"""Waymark — two-way mapping between paths and navigation state.

A route table maps Sinatra-alike patterns to destination names.  Paths
parse into a state (``destination``, ``parameters``, ``remaining_path``)
and states stringify back into paths.  A link keeps a live path and a
live state synchronized as either changes.

Basic usage::

    from waymark import compile_routes

    table = compile_routes("/", {
        "photos/+photoIds&": "photos",
        "photo/+photoId": "photo",
        "notes/:noteId?": "notes",
        "::": "colon",
    })

    table.parse("/photos/10&20")
    # ParseResult(destination="photos", parameters={"photoIds": [10, 20]})
    table.stringify({"destination": "notes", "parameters": {"noteId": 0}})
    # "/notes/0"

Live synchronization::

    from waymark import NavigationState, PathSlot

    slot, state = PathSlot("/photos/10"), NavigationState()
    link = table.link_two_way(slot, state)
    state.parameters["photoIds"].append(20)
    slot.path  # "/photos/10&20"
    link()     # release
"""

__version__ = "0.1.0"
__all__ = [
    "CompiledRoute",
    "ConfigurationError",
    "NavigationState",
    "ParseResult",
    "PathLink",
    "PathSlot",
    "RouteController",
    "RouteTable",
    "RouterConfig",
    "Scope",
    "UnknownDestination",
    "WaymarkError",
    "compile_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waymark`` fast while providing a clean top-level API.
    """
    if name in ("RouteTable", "compile_routes"):
        from waymark.routing import router as _router

        return getattr(_router, name)

    if name == "CompiledRoute":
        from waymark.routing.pattern import CompiledRoute

        return CompiledRoute

    if name == "ParseResult":
        from waymark.routing.route import ParseResult

        return ParseResult

    if name == "PathLink":
        from waymark.routing.link import PathLink

        return PathLink

    if name in ("NavigationState", "PathSlot", "Scope"):
        from waymark import reactive as _reactive

        return getattr(_reactive, name)

    if name == "RouteController":
        from waymark.controller import RouteController

        return RouteController

    if name == "RouterConfig":
        from waymark.config import RouterConfig

        return RouterConfig

    if name in ("ConfigurationError", "UnknownDestination", "WaymarkError"):
        from waymark import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
