"""``waypoint routes`` and ``waypoint resolve``.

Resolve an import string to a Router and print its route table, or
the route and parameters a hash resolves to.
"""

import argparse
import sys

from waypoint.cli._resolve import resolve_router
from waypoint.router import Router
from waypoint.routing.matcher import values_from_hash
from waypoint.routing.pattern import CATCH_ALL_ROUTE


def _load(import_string: str) -> Router:
    try:
        return resolve_router(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of PATTERN, HANDLERS and PROVIDER for a router."""
    router = _load(args.router)
    registry = router.registry

    patterns = registry.patterns
    if not patterns:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for pattern in patterns:
        handlers = ", ".join(f"{entry.name} [{entry.kind.value}]" for entry in registry.stack(pattern))
        binding = registry.provider(pattern)
        provider = ""
        if binding is not None:
            name = getattr(binding.callback, "__name__", str(binding.callback))
            provider = f"{name} ({binding.trigger}, {binding.expires_ms // 1000}s)"
        rows.append((pattern or "''", handlers, provider))

    max_pattern = max(max(len(r[0]) for r in rows), 7)  # "PATTERN" header
    max_handlers = max(max(len(r[1]) for r in rows), 8)  # "HANDLERS" header

    fmt = f"{{:<{max_pattern}}}  {{:<{max_handlers}}}  {{}}"
    print(fmt.format("PATTERN", "HANDLERS", "PROVIDER"))
    sep_len = max_pattern + max_handlers + 4 + max((len(r[2]) for r in rows), default=0)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))


def run_resolve(args: argparse.Namespace) -> None:
    """Print the route a hash resolves to and its named parameters."""
    router = _load(args.router)

    hash = args.hash.lstrip("#")
    route = router.route_by_hash(hash)
    if route is None:
        if not router.registry.has(CATCH_ALL_ROUTE):
            print(f"No route matches {hash!r}", file=sys.stderr)
            raise SystemExit(1)
        route = CATCH_ALL_ROUTE

    print(f"route: {route}")
    for name, value in values_from_hash(hash, route).items():
        print(f"  {name} = {value}")
