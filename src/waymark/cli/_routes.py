"""``waymark routes`` — list compiled routes.

Resolves an import string to a route table and prints every route with
its pattern, destination, and variables, in parse priority order.
"""

import argparse
import sys

from waymark.cli._resolve import resolve_table
from waymark.errors import ConfigurationError
from waymark.routing.route import Variable


def _describe(variable: Variable) -> str:
    if variable.is_remainder:
        return "..."
    suffix = "&" if variable.plural else "?" if variable.optional else ""
    return f"{variable.kind.value}{variable.name}{suffix}"


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of PATTERN, DESTINATION, and VARIABLES."""
    try:
        table = resolve_table(
            args.table,
            prefix=args.prefix,
            case_insensitive=args.ignore_case,
        )
    except (ModuleNotFoundError, AttributeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = table.routes
    if not routes:
        print("No routes registered.")
        return

    # Build rows: (pattern, destination, variables)
    rows: list[tuple[str, str, str]] = [
        (route.pattern, route.destination, " ".join(_describe(v) for v in route.variables))
        for route in routes
    ]

    # Column widths
    max_pattern = max(max(len(r[0]) for r in rows), 7)  # "PATTERN" header
    max_dest = max(max(len(r[1]) for r in rows), 11)  # "DESTINATION" header

    fmt = f"{{:<{max_pattern}}}  {{:<{max_dest}}}  {{}}"
    print(fmt.format("PATTERN", "DESTINATION", "VARIABLES"))
    sep_len = max_pattern + max_dest + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for pattern, destination, variables in rows:
        print(fmt.format(pattern, destination, variables).rstrip())
