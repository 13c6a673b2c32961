"""Waymark CLI — inspect, parse, and stringify with a route table.

Entry point registered as ``waymark`` in ``pyproject.toml``::

    [project.scripts]
    waymark = "waymark.cli:main"
"""

import argparse
import logging
import sys


def _add_table_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "table",
        help="Import string (e.g. myapp:routes)",
    )
    parser.add_argument(
        "--prefix",
        default="",
        help="Prefix for every pattern when TABLE is a plain mapping",
    )
    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match case-insensitively when TABLE is a plain mapping",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waymark`` command."""
    from waymark.cli._paths import parse_assignment

    parser = argparse.ArgumentParser(
        prog="waymark",
        description="Waymark — two-way mapping between paths and navigation state.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log compilation and matching at debug level",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waymark routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List compiled routes")
    _add_table_arguments(routes_parser)

    # -- waymark parse ----------------------------------------------------
    parse_parser = subparsers.add_parser("parse", help="Parse a path into state")
    _add_table_arguments(parse_parser)
    parse_parser.add_argument("path", help="Path to parse (e.g. /photos/10&20)")

    # -- waymark stringify ------------------------------------------------
    stringify_parser = subparsers.add_parser("stringify", help="Generate the path for a state")
    _add_table_arguments(stringify_parser)
    stringify_parser.add_argument("destination", help="Destination name")
    stringify_parser.add_argument(
        "-p",
        "--param",
        action="append",
        type=parse_assignment,
        metavar="NAME=VALUE",
        help="Parameter value; repeatable. Use & to pass a list",
    )
    stringify_parser.add_argument(
        "-r",
        "--remaining",
        default=None,
        help="Remaining path appended after the route",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waymark.cli._routes import run_routes

        run_routes(args)
    elif args.command == "parse":
        from waymark.cli._paths import run_parse

        run_parse(args)
    elif args.command == "stringify":
        from waymark.cli._paths import run_stringify

        run_stringify(args)
