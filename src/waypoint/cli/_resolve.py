"""Router lookup for the CLI — ``"module:attribute"`` to a Router.

The attribute may hold a ``Router``, a zero-argument factory returning
one, or a declarative ``RoutesConfig`` table. Tables are registered on
a fresh router backed by ``MemoryHost`` with ``lazy_create`` set, so no
page is instantiated just to inspect the route table.
"""

import importlib
from typing import Any

from waypoint.config import RouterConfig
from waypoint.router import Router
from waypoint.routing.table import RoutesConfig
from waypoint.testing import MemoryHost

DEFAULT_ATTRIBUTE = "router"


def router_from_table(table: RoutesConfig) -> Router:
    """A detached router holding *table*'s routes."""
    router = Router(MemoryHost(), RouterConfig(lazy_create=True))
    router.add(table)
    return router


def _coerce(obj: Any, import_string: str) -> Router:
    if isinstance(obj, Router):
        return obj
    if isinstance(obj, RoutesConfig):
        return router_from_table(obj)
    msg = f"{import_string!r} resolved to {type(obj).__name__}, expected a Router or RoutesConfig"
    raise TypeError(msg)


def resolve_router(import_string: str) -> Router:
    """Resolve *import_string* to a Router.

    ``"myapp"`` looks up ``myapp.router``. Callables other than tables
    are treated as factories and called once.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the factory fails or the result is neither a
            ``Router`` nor a ``RoutesConfig``.
    """
    module_path, _, attr_name = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name or DEFAULT_ATTRIBUTE)

    if callable(obj) and not isinstance(obj, (Router, RoutesConfig)):
        try:
            obj = obj()
        except Exception as exc:
            raise TypeError(f"Router factory {import_string!r} failed: {exc}") from exc

    return _coerce(obj, import_string)
