"""Waypoint — hash routing and page lifecycle for single-page applications.

Resolves a location hash to a registered page, creates, reuses, caches
or destroys page instances by policy, and sequences data loading
around page transitions.

Basic usage::

    from waypoint import Router, RouterConfig

    router = Router(host, RouterConfig(lazy_create=True))
    router.root("home", HomePage)
    router.route("detail/:id", DetailPage)
    router.before("detail/:id", fetch_detail, 60)

    await router.start()
    await router.navigate("detail/42")

Testing without a GUI::

    from waypoint.testing import MemoryHost
    router = Router(MemoryHost())
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AsyncComponentRegistrationMisuse",
    "AsyncLoader",
    "CallbackLocation",
    "ConfigurationError",
    "DataProviderFailure",
    "HistoryStack",
    "MemoryLocation",
    "RegistrationConflict",
    "RouteDefinition",
    "RouteModifiers",
    "RouteNotFound",
    "Router",
    "RouterConfig",
    "RoutesConfig",
    "TransitionFailure",
    "TransitionRegistry",
    "TriggerType",
    "UnsupportedTriggerType",
    "ViewHost",
    "WaypointError",
]

# name -> module path
_LAZY_IMPORTS: dict[str, str] = {
    "AsyncComponentRegistrationMisuse": "waypoint.errors",
    "AsyncLoader": "waypoint.routing.handlers",
    "CallbackLocation": "waypoint.location",
    "ConfigurationError": "waypoint.errors",
    "DataProviderFailure": "waypoint.errors",
    "HistoryStack": "waypoint.history",
    "MemoryLocation": "waypoint.location",
    "RegistrationConflict": "waypoint.errors",
    "RouteDefinition": "waypoint.routing.table",
    "RouteModifiers": "waypoint.routing.registry",
    "RouteNotFound": "waypoint.errors",
    "Router": "waypoint.router",
    "RouterConfig": "waypoint.config",
    "RoutesConfig": "waypoint.routing.table",
    "TransitionFailure": "waypoint.errors",
    "TransitionRegistry": "waypoint.transitions",
    "TriggerType": "waypoint.providers",
    "UnsupportedTriggerType": "waypoint.errors",
    "ViewHost": "waypoint.host",
    "WaypointError": "waypoint.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_path), name)
