"""Router — the navigation controller and owner of all routing state.

One ``Router`` holds the route registry, the page lifecycle, the
navigation history, the navigation register and the active-page
pointers. Create one per application and drive it from a single event
loop::

    router = Router(host, RouterConfig(lazy_create=True))
    router.root("home", HomePage)
    router.route("detail/:id", DetailPage)
    router.before("detail/:id", fetch_detail, 60)
    router.route("!", ErrorPage)

    await router.start()
    await router.navigate("detail/42")
    await router.step(-1)

Concurrency:
    Navigations are not serialized or cancelled. Two overlapping
    ``navigate()`` calls both run to completion and whichever load
    finishes last owns ``active_page``, ``active_route`` and
    ``active_hash``. The router is not thread-safe; hosts with several
    threads must funnel every call through one event loop.
"""

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Clock
from waypoint.config import RouterConfig
from waypoint.errors import ConfigurationError, RegistrationConflict
from waypoint.history import HistoryStack
from waypoint.host import ViewHost, Widget
from waypoint.location import Location, MemoryLocation, query_params
from waypoint.pages.lifecycle import PageLifecycle
from waypoint.providers import TriggerType
from waypoint.register import BACKTRACK, FLOOR_BACKTRACK, RELOAD, RESUME, NavigationRegister
from waypoint.routing.handlers import AsyncLoader, HandlerEntry
from waypoint.routing.matcher import route_by_hash, values_from_hash
from waypoint.routing.pattern import (
    BOOT_ROUTE,
    CATCH_ALL_ROUTE,
    normalize,
    split_segments,
    strip_regex,
)
from waypoint.routing.registry import RouteModifiers, RouteRegistry
from waypoint.routing.table import RoutesConfig
from waypoint.transitions import TransitionRegistry

logger = logging.getLogger("waypoint.router")

PAGES_STATE = "Pages"
WIDGETS_STATE = "Widgets"


def _now_ms() -> float:
    return time.time() * 1000


class Router:
    """Hash router with page lifecycle management.

    Mutable during setup (route, provider and widget registration).
    Navigation methods are coroutines; see the module docstring for
    the concurrency contract.
    """

    __slots__ = (
        "_boot_request",
        "_forced_hash",
        "_initialised",
        "_root",
        "_unsubscribe",
        "_update_hash",
        "active_widget",
        "config",
        "history",
        "host",
        "location",
        "pages",
        "register",
        "registry",
        "transitions",
    )

    def __init__(
        self,
        host: ViewHost,
        config: RouterConfig | None = None,
        *,
        location: Location | None = None,
        clock: Clock | None = None,
        transitions: TransitionRegistry | None = None,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.host = host
        self.location: Location = location if location is not None else MemoryLocation()
        self.register = NavigationRegister()
        self.history = HistoryStack(store_duplicates=self.config.store_same_hash)
        self.transitions = transitions or TransitionRegistry()
        self.registry = RouteRegistry(None if self.config.lazy_create else self._materialize)
        self.pages = PageLifecycle(
            self.registry,
            host,
            config=self.config,
            register=self.register,
            transitions=self.transitions,
            clock=clock or _now_ms,
        )
        self.active_widget: Widget | None = None

        self._root: str | Callable[[], Any] | None = None
        self._boot_request: Callable[..., Any] | None = None
        self._forced_hash: str | None = None
        self._update_hash = True
        self._initialised = False

        # Writes to a MemoryLocation come back as hash changes
        subscribe = getattr(self.location, "subscribe", None)
        self._unsubscribe: Callable[[], None] | None = (
            subscribe(self.handle_hash_change) if subscribe is not None else None
        )

    def close(self) -> None:
        """Stop listening to location changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # -- Registration --

    def route(
        self,
        pattern: str,
        handler: Any = None,
        modifiers: RouteModifiers | Mapping[str, Any] | None = None,
    ) -> Any:
        """Register *handler* for *pattern*.

        *handler* is a page type, a page instance, an ``AsyncLoader`` or
        a plain function called as ``handler(router, params)``. Without a
        handler, returns a decorator::

            @router.route("about")
            class AboutPage: ...
        """
        if handler is None:

            def decorator(obj: Any) -> Any:
                self.registry.register_route(pattern, obj, modifiers)
                return obj

            return decorator

        return self.registry.register_route(pattern, handler, modifiers)

    def root(
        self,
        pattern: str,
        handler: Any = None,
        modifiers: RouteModifiers | Mapping[str, Any] | None = None,
    ) -> Any:
        """Register a route and make it the landing route."""
        self._root = normalize(pattern)
        return self.route(pattern, handler, modifiers)

    def widget(self, pattern: str, widgets: str | Iterable[str] = ()) -> None:
        """Widgets (by ref, case-insensitive) visible while *pattern* is active."""
        self.registry.register_widgets(pattern, widgets)

    def on(
        self,
        pattern: str,
        callback: Callable[..., Any],
        expires: float = 0,
        trigger: str = TriggerType.ON,
    ) -> None:
        """Bind a data provider; the app shows its loading state while it runs.

        *callback* is called as ``callback(page, params)`` and may be
        async. *expires* is the cache time in seconds.
        """
        self.registry.register_provider(pattern, callback, expires, trigger)

    def before(self, pattern: str, callback: Callable[..., Any], expires: float = 0) -> None:
        """Bind a data provider that runs before the page becomes visible."""
        self.on(pattern, callback, expires, TriggerType.BEFORE)

    def after(self, pattern: str, callback: Callable[..., Any], expires: float = 0) -> None:
        """Bind a data provider that runs after the page became visible."""
        self.on(pattern, callback, expires, TriggerType.AFTER)

    def boot(self, callback: Callable[..., Any]) -> None:
        """Async pre-flight run by ``start()`` with the startup query params."""
        self._boot_request = callback

    def add(self, table: RoutesConfig) -> None:
        """Register a declarative route table.

        Router-wide settings (root, boot, boot component, update_hash)
        are only taken from the first table added.

        Raises ``ConfigurationError`` for a route with neither a component
        nor a hook.
        """
        if not self._initialised:
            if isinstance(table.root, str):
                self._root = normalize(table.root)
            elif table.root is not None:
                self._root = table.root
            if table.boot is not None:
                self.boot(table.boot)
            if table.boot_component is not None:
                self.route(BOOT_ROUTE, table.boot_component)
            if table.update_hash is not None:
                self._update_hash = table.update_hash
            self._initialised = True

        for definition in table.routes:
            handler = definition.component
            if handler is None:
                handler = definition.hook
            elif definition.is_async:
                handler = AsyncLoader(handler)
            if handler is None:
                raise ConfigurationError(f"Route {definition.path!r} needs a component or a hook")
            self.route(definition.path, handler, definition.options)
            if definition.widgets:
                self.widget(definition.path, definition.widgets)
            if definition.on is not None:
                self.on(definition.path, definition.on, definition.cache)
            if definition.before is not None:
                self.before(definition.path, definition.before, definition.cache)
            if definition.after is not None:
                self.after(definition.path, definition.after, definition.cache)

    @property
    def conflicts(self) -> list[RegistrationConflict]:
        """Registration conflicts logged so far."""
        return list(self.registry.conflicts)

    # -- Resolution --

    def route_by_hash(self, hash: str) -> str | None:
        """Registered pattern matching *hash*, or ``None``."""
        return route_by_hash(self.registry.patterns, hash)

    def current_hash(self) -> str:
        """The hash navigation starts from.

        With external location updates disabled the location never
        changes, so the last navigated target stands in for it.
        """
        hash = self.location.get_hash()
        if not self._must_update_hash() and self._forced_hash:
            hash = self._forced_hash
        return hash

    def hash(self) -> str:
        return self.location.get_hash()

    async def handle_hash_change(self, override: str | None = None) -> Any:
        """Resolve the current (or *override*) hash and run its handlers.

        Returns the loaded page, or ``None`` when only callbacks ran or
        nothing matched. Unknown hashes go to ``*`` when registered.
        """
        hash = (override or self.location.get_hash()).lstrip("#")
        route = self.route_by_hash(hash)
        if route is None:
            if self.registry.has(CATCH_ALL_ROUTE):
                return await self._dispatch(CATCH_ALL_ROUTE, hash)
            logger.debug("No route matches hash %r", hash)
            return None
        return await self._dispatch(route, hash)

    async def _dispatch(self, route: str, hash: str) -> Any:
        page = None
        for entry in reversed(self.registry.stack(route)):
            if entry.is_page:
                page = await self.pages.load(route, hash)
                self.host.refocus()
            else:
                await invoke(entry.target, self, values_from_hash(hash, route))
        return page

    # -- Navigation --

    async def navigate(
        self,
        url: str,
        args: Mapping[str, Any] | bool | None = None,
        store: bool = True,
    ) -> None:
        """Navigate to *url*.

        *args* (a mapping) becomes the navigation register for the next
        page; ``args=False`` keeps the current hash out of history. The
        current hash is pushed to history unless its route sets
        ``prevent_storage`` or ``store=False``. A target route with
        ``clear_history`` empties the history first. Navigating to the
        current hash only reprocesses it with ``{"reload": True}``.
        """
        self.register.reset()

        hash = self.current_hash()
        modifiers = self.registry.modifiers(self.route_by_hash(hash))
        config_store = not (modifiers and (modifiers.prevent_storage or modifiers.store is False))

        if isinstance(args, Mapping):
            self.register.reset(args)
        elif args is False:
            store = False

        if hash and store and config_store:
            self.history.push(hash)

        target = self.registry.modifiers(self.route_by_hash(url))
        if target is not None and target.clear_history:
            self.history.clear()

        if hash.lstrip("#") != url:
            if not self._must_update_hash():
                self._forced_hash = url
                await self.handle_hash_change(url)
            else:
                await self.location.set_hash(url)
        elif self.register.read(RELOAD):
            await self.handle_hash_change(hash)

    async def step(self, direction: int = 0) -> bool:
        """Directional step in history. Only ``-1`` (back) is supported.

        Pops the last stored hash and navigates to it. With an empty
        history and ``backtrack`` enabled, strips trailing segments off
        the current hash until a shorter hash matches a route. Falls
        back to the host's ``handle_app_close``. Returns whether
        anything handled the step.
        """
        if direction >= 0:
            return False

        previous = self.history.pop()
        if previous is not None:
            await self.navigate(previous, {BACKTRACK: True}, False)
            return True

        if self.config.backtrack:
            parts = split_segments(strip_regex(self.current_hash()))
            while len(parts) > 1:
                parts.pop()
                candidate = "/".join(parts)
                if self.route_by_hash(candidate):
                    await self.navigate(candidate, {FLOOR_BACKTRACK: True}, False)
                    return True

        close = getattr(self.host, "handle_app_close", None)
        if close is not None:
            await invoke(close)
            return True
        return False

    async def capture(self, key: Any) -> bool:
        """Numeric key shortcut: key N navigates to the N-th registered route."""
        if not self.config.number_navigation:
            return False
        try:
            index = int(key)
        except (TypeError, ValueError):
            return False
        patterns = self.registry.patterns
        if 1 <= index <= len(patterns):
            await self.navigate(patterns[index - 1])
            return True
        return False

    # -- Boot --

    async def start(self) -> None:
        """Run the boot request, then route the startup hash.

        With a ``@boot-page`` registered, it is shown first and the
        original target is kept in the register for ``resume()``.
        """
        hash = self.location.get_hash().lstrip("#")
        if self._boot_request is not None:
            await invoke(self._boot_request, query_params(hash))

        # a refreshed boot page resumes to the root, not to itself
        is_direct_load = BOOT_ROUTE in hash
        if self.registry.has(BOOT_ROUTE):
            root = await self._resolve_root()
            await self.navigate(
                BOOT_ROUTE,
                {RESUME: root if is_direct_load else (hash or root), RELOAD: True},
            )
        elif not hash and self._root is not None:
            root = await self._resolve_root()
            if root:
                await self.navigate(root)
        else:
            await self.handle_hash_change()

    async def resume(self) -> None:
        """Continue the navigation deferred by the boot page."""
        if RESUME not in self.register:
            return
        hash = str(self.register[RESUME] or "").lstrip("#")
        if hash and self.route_by_hash(hash):
            await self.navigate(hash, False)
            return
        root = await self._resolve_root()
        if root:
            await self.navigate(root, False)

    async def _resolve_root(self) -> str | None:
        if self._root is None or isinstance(self._root, str):
            return self._root
        return await invoke(self._root)

    # -- Focus --

    def widget_by_name(self, name: str) -> Widget | None:
        name = name.lower()
        for widget in self.host.widgets:
            if widget.ref.lower() == name:
                return widget
        return None

    def focus_widget(self, name: str) -> bool:
        """Delegate focus to the on-screen widget with ref *name*."""
        widget = self.widget_by_name(name)
        if widget is None:
            return False
        self.active_widget = widget
        self.host.set_state(WIDGETS_STATE, widget)
        return True

    def restore_focus(self) -> None:
        """Give focus back to the pages."""
        self.host.set_state(PAGES_STATE)

    def handle_remote(self, kind: str, name: str = "") -> None:
        if kind == "widget":
            self.focus_widget(name)
        elif kind == "page":
            self.restore_focus()

    def restore(self) -> None:
        if self.config.auto_restore_remote:
            self.handle_remote("page")

    # -- State --

    @property
    def active_page(self) -> Any:
        """The active page, or ``None`` once it was removed from the host."""
        page = self.pages.active_page
        if page is not None and self.host.is_attached(page):
            return page
        return None

    @property
    def active_route(self) -> str | None:
        return self.pages.active_route

    @property
    def active_hash(self) -> str | None:
        return self.pages.active_hash

    def is_page_expired(self, page: Any) -> bool:
        return self.pages.is_expired(page)

    # -- Internal --

    def _materialize(self, entry: HandlerEntry) -> HandlerEntry:
        return self.pages.materialize(entry)

    def _must_update_hash(self) -> bool:
        return self.config.update_hash and self._update_hash
