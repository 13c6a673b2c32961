"""``waymark parse`` and ``waymark stringify`` — try a table from the shell.

``parse`` prints the matched state as JSON; ``stringify`` prints the
path generated for a destination and parameters.  Both exit with code 1
when the table cannot answer (no match, unknown destination).
"""

import argparse
import json
import re
import sys
from typing import Any

from waymark.cli._resolve import resolve_table
from waymark.errors import ConfigurationError, UnknownDestination
from waymark.routing.route import ParseResult
from waymark.routing.router import RouteTable

_DIGITS_RE = re.compile(r"^[0-9]+$")


def _load(args: argparse.Namespace) -> RouteTable:
    try:
        return resolve_table(
            args.table,
            prefix=args.prefix,
            case_insensitive=args.ignore_case,
        )
    except (ModuleNotFoundError, AttributeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def _scalar(text: str) -> str | int:
    return int(text) if _DIGITS_RE.match(text) else text


def parse_assignment(text: str) -> tuple[str | int, Any]:
    """Parse a ``NAME=VALUE`` command-line parameter.

    Digit-only names are positional keys; digit-only values become
    integers; values containing ``&`` become lists.
    """
    name, sep, value = text.partition("=")
    if not sep or not name:
        msg = f"expected NAME=VALUE, got {text!r}"
        raise argparse.ArgumentTypeError(msg)
    if "&" in value:
        return _scalar(name), [_scalar(part) for part in value.split("&")]
    return _scalar(name), _scalar(value)


def run_parse(args: argparse.Namespace) -> None:
    """Print the state for ``args.path`` as JSON."""
    table = _load(args)
    result = table.parse(args.path)
    if result is None:
        print(f"Error: no route matches {args.path!r}", file=sys.stderr)
        raise SystemExit(1)

    print(
        json.dumps(
            {
                "destination": result.destination,
                "parameters": result.parameters,
                "remaining_path": result.remaining_path,
            },
            indent=2,
        )
    )


def run_stringify(args: argparse.Namespace) -> None:
    """Print the path for ``args.destination`` and its parameters."""
    table = _load(args)
    parameters = dict(args.param or ())
    # A single value given for a plural variable is a one-element list
    for name, variable in (table.terms_for(args.destination) or {}).items():
        value = parameters.get(name)
        if variable.plural and value is not None and not isinstance(value, list):
            parameters[name] = [value]
    state = ParseResult(
        destination=args.destination,
        parameters=parameters,
        remaining_path=args.remaining,
    )
    try:
        print(table.stringify(state))
    except UnknownDestination as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
