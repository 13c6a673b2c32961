"""Table import resolution — resolves ``"module:attribute"`` strings to route tables.

Shared utility used by every ``waymark`` subcommand to locate a route
table from a user-supplied import string.
"""

import importlib
from collections.abc import Mapping

from waymark.controller import RouteController
from waymark.errors import ConfigurationError
from waymark.routing.router import RouteTable


def resolve_table(
    import_string: str,
    *,
    prefix: str = "",
    case_insensitive: bool = False,
) -> RouteTable:
    """Resolve an import string to a ``RouteTable``.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"routes"`` (e.g. ``"myapp"`` resolves to
    ``myapp.routes``).

    The attribute may be a ``RouteTable``, a ``RouteController`` (its
    current table is used), a ``{pattern: destination}`` mapping
    (compiled with *prefix* and *case_insensitive*), or a zero-argument
    factory returning one of those.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        ConfigurationError: If the resolved object is none of the above,
            or the factory raised.

    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "routes"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    # Support factory functions - call them if they're not already a table
    if callable(obj) and not isinstance(obj, (RouteTable, RouteController)):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise ConfigurationError(msg) from exc

    if isinstance(obj, RouteController):
        obj = obj.router
        if obj is None:
            msg = f"{import_string!r} is a RouteController without routes"
            raise ConfigurationError(msg)

    if isinstance(obj, Mapping):
        return RouteTable(prefix, obj, case_insensitive)

    if not isinstance(obj, RouteTable):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a waymark.RouteTable"
        raise ConfigurationError(msg)

    return obj
