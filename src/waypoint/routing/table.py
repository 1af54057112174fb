"""Declarative route tables.

An alternative to calling ``Router.route()`` / ``on()`` / ``widget()``
one by one::

    router.add(RoutesConfig(
        root="home",
        routes=(
            RouteDefinition("home", HomePage, before=fetch_home, cache=30),
            RouteDefinition("settings", load_settings, is_async=True),
            RouteDefinition("detail/:id", DetailPage, widgets=("Menu",)),
        ),
    ))
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """One route: its page (or hook), options and bindings.

    ``component`` is a page type or page instance. With ``is_async=True``
    it is a factory returning an awaitable page type.
    ``hook`` is used when there is no component. ``cache`` is the
    provider expiry in seconds.
    """

    path: str
    component: Any = None
    hook: Callable[..., Any] | None = None
    options: Mapping[str, Any] | None = None
    widgets: tuple[str, ...] = ()
    on: Callable[..., Any] | None = None
    before: Callable[..., Any] | None = None
    after: Callable[..., Any] | None = None
    cache: float = 0
    is_async: bool = False


@dataclass(frozen=True, slots=True)
class RoutesConfig:
    """A full route table plus the router-wide settings that ride with it.

    ``root`` is the landing hash, or a sync/async callable returning
    one. ``boot_component`` is registered as the ``@boot-page`` route.
    ``update_hash`` (when set) overrides whether the external location
    is written on navigate, on top of ``RouterConfig.update_hash``.
    """

    routes: tuple[RouteDefinition, ...] = ()
    root: str | Callable[[], Any] | None = None
    boot: Callable[..., Any] | None = None
    boot_component: Any = None
    update_hash: bool | None = None
