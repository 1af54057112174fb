"""Waypoint CLI — inspect a router's route table and hash resolution.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint — hash routing and page lifecycle for single-page applications.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )

    # -- waypoint resolve -------------------------------------------------
    resolve_parser = subparsers.add_parser("resolve", help="Show which route a hash resolves to")
    resolve_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )
    resolve_parser.add_argument("hash", help="Location hash (e.g. detail/42)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from waypoint.cli._routes import run_resolve

        run_resolve(args)
