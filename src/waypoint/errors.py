"""Waypoint exception hierarchy.

Shared across the registry, matcher, lifecycle and router so every
module raises and catches the same types.
"""

from typing import Any


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when router configuration is invalid.

    Configuration errors indicate programmer error and are meant to
    abort startup.
    """


class AsyncComponentRegistrationMisuse(ConfigurationError):
    """An async route was given something other than a page factory."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Error registering async route with path {path!r}. "
            "Component property in async routes must be an async factory "
            "in the form of () -> Awaitable[page type]"
        )
        self.path = path


class RegistrationConflict(WaypointError):  # noqa: N818 — reported, not raised
    """A provider, widget set or page was registered twice for one route.

    Never raised by the router; the name is used in the logged warning
    and by ``Router.conflicts`` for introspection.
    """


class UnsupportedTriggerType(WaypointError):  # noqa: N818 — mirrors the trigger protocol
    """A provider binding names a trigger kind the router doesn't implement."""

    def __init__(self, trigger: str) -> None:
        super().__init__(f"{trigger} is not supported")
        self.trigger = trigger


class DataProviderFailure(WaypointError):  # noqa: N818 — attached to the error page
    """Data provisioning for *page* failed with *error*.

    Instances are attached to the error page (route ``!``) as its
    ``error`` attribute.
    """

    def __init__(self, page: Any, error: BaseException) -> None:
        super().__init__(f"data provider failed for {type(page).__name__}: {error}")
        self.page = page
        self.error = error


class TransitionFailure(WaypointError):  # noqa: N818 — logged, never propagated
    """A custom transition resolver raised.

    Logged and replaced with the default cross-fade; never propagated
    out of the navigation flow.
    """


class RouteNotFound(WaypointError):  # noqa: N818 — conventional name in routers
    """No page is registered for the route being loaded."""

    def __init__(self, route: str) -> None:
        super().__init__(f"No page registered for route {route!r}")
        self.route = route
