"""Waymark exception hierarchy.

Shared across the route table, the path link, the controller, and the CLI
so every module raises and catches the same types.

A path that matches no route is *not* an error: ``RouteTable.parse``
returns ``None`` and the caller decides what an unroutable path means.
"""


class WaymarkError(Exception):
    """Base for all waymark-specific errors."""


class ConfigurationError(WaymarkError):
    """Raised when a route table or controller is configured incorrectly.

    Typically raised while resolving a table for the CLI, or when a
    controller is given something other than a pattern mapping.
    """


class UnknownDestination(WaymarkError, KeyError):  # noqa: N818
    """No route is registered for the requested destination.

    Raised synchronously by ``RouteTable.stringify``. This is a programmer
    error: the state names a destination the route table does not know.
    """

    def __init__(self, destination: object) -> None:
        self.destination = destination
        super().__init__(destination)

    def __str__(self) -> str:
        return f"No routes for the destination: {self.destination!r}"
