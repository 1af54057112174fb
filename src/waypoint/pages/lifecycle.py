"""Page lifecycle — load, provide, transition and clean up routed pages.

Each route's page slot moves through three states::

    Uncreated(Constructor | AsyncLoader)
        --load-->     Created(Instance)
        --cleanup-->  Cached(Constructor)      (destroying policies only)
        --load-->     Created(Instance)

The page object lives in the route's handler stack; bookkeeping
(route, hash, expiry, original constructor) lives in ``PageMetaTable``.

Ordering contract for a load that has a provider binding is owned by
``waypoint.providers``; without one the sequence is: provide URL data,
transition, clean up the old page, emit ``mounted``/``changed``.
Destruction of the old page always happens after the incoming
transition resolved.
"""

import logging
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Clock
from waypoint.config import RouterConfig
from waypoint.errors import DataProviderFailure, RouteNotFound
from waypoint.host import ViewHost
from waypoint.pages.metadata import PageMetaTable
from waypoint.providers import IDLE_STATE, LOADING_STATE, Transfer, get_trigger
from waypoint.register import BACKTRACK, FLOOR_BACKTRACK, KEEP_ALIVE, NavigationRegister
from waypoint.routing.handlers import HandlerEntry, HandlerKind
from waypoint.routing.matcher import values_from_hash
from waypoint.routing.pattern import ERROR_ROUTE
from waypoint.routing.registry import RouteRegistry
from waypoint.transitions import TransitionRegistry, do_transition

logger = logging.getLogger("waypoint.pages")


def widget_references(host: ViewHost) -> dict[str, Any]:
    """The host's widgets keyed by lower-cased ref."""
    return {widget.ref.lower(): widget for widget in host.widgets}


class PageLifecycle:
    """Creates, reuses, feeds and destroys page instances for the router.

    Also the ``TriggerSteps`` implementation the provider triggers
    sequence (``fetch``, ``transition``, ``cleanup``, ``stamp``,
    ``set_state``).
    """

    __slots__ = (
        "_clock",
        "_config",
        "_host",
        "_register",
        "_registry",
        "_shown",
        "_transitions",
        "active_hash",
        "active_page",
        "active_route",
        "meta",
    )

    def __init__(
        self,
        registry: RouteRegistry,
        host: ViewHost,
        *,
        config: RouterConfig,
        register: NavigationRegister,
        transitions: TransitionRegistry,
        clock: Clock,
    ) -> None:
        self._registry = registry
        self._host = host
        self._config = config
        self._register = register
        self._transitions = transitions
        self._clock = clock
        self.meta = PageMetaTable()

        # Last writer wins; overlapping loads are not serialized
        self.active_page: Any = None
        self.active_route: str | None = None
        self.active_hash: str | None = None

        # Page most recently transitioned in
        self._shown: Any = None

    # -- Creation --

    def create(self, page_type: type) -> Any:
        """Instantiate *page_type* through the host (not yet attached)."""
        page = self._host.create(page_type)
        if self._host.widgets:
            page.widgets = widget_references(self._host)
        self.meta.get(page).constructor = page_type
        return page

    def materialize(self, entry: HandlerEntry) -> HandlerEntry:
        """Eager creation at registration time (``lazy_create=False``)."""
        if entry.kind is HandlerKind.CONSTRUCTOR:
            page = self.create(entry.target)
            self._host.attach(page)
            return HandlerEntry(HandlerKind.INSTANCE, page)
        if entry.kind is HandlerKind.INSTANCE and not self._host.is_attached(entry.target):
            self._host.attach(entry.target)
        return entry

    def is_expired(self, page: Any) -> bool:
        """True once the page's provided data passed its cache time."""
        meta = self.meta.peek(page)
        if meta is None or meta.expires_at is None:
            return False
        return self._clock() >= meta.expires_at

    # -- Loading --

    async def load(self, route: str, hash: str) -> Any:
        """Load the page for *route*, making it the active page.

        Raises ``RouteNotFound`` when *route* carries no page. Data
        provider failures never propagate; they are routed to the
        error page (``!``) or logged.
        """
        return await self._load(route, hash, self.active_page)

    async def _load(self, route: str, hash: str, old: Any) -> Any:
        index, entry = self._registry.page_entry(route)
        if entry is None:
            raise RouteNotFound(route)

        binding = self._registry.provider(route)
        reuse = provide = created = False

        if entry.kind is HandlerKind.INSTANCE:
            page = entry.target
            if not self._host.is_attached(page):
                self._host.attach(page)
            if binding is not None:
                meta = self.meta.peek(page)
                # Expired, or loaded before with other url parameters
                if self.is_expired(page) or meta is None or meta.hash != hash:
                    provide = True
            active = self.meta.peek(self.active_page) if self.active_page is not None else None
            if active is not None and active.route == route:
                reuse = True
        else:
            page_type = entry.target
            if entry.kind is HandlerKind.ASYNC_LOADER:
                loaded = await invoke(page_type.loader)
                if not isinstance(loaded, type):
                    loaded = getattr(loaded, "default", loaded)
                page_type = loaded
            page = self.create(page_type)
            self._host.attach(page)
            self._registry.replace(route, index, HandlerEntry(HandlerKind.INSTANCE, page))
            provide = binding is not None
            created = True

        meta = self.meta.get(page)
        # Eagerly created pages mount on their first load
        created = created or meta.route is None
        meta.hash = hash
        meta.route = route

        if old is page:
            old = None

        failure: Exception | None = None
        if reuse:
            if provide:
                try:
                    await self.fetch(page, route, hash)
                    self.stamp(page, route)
                    await self.emit(page, "data_provided", "changed")
                except Exception as exc:
                    failure = exc
            else:
                await self.provide(page, route, hash)
                await self.emit(page, "changed")
        elif provide:
            try:
                trigger = get_trigger(binding.trigger)
                await trigger(self, Transfer(page=page, old=old, route=route, hash=hash))
                await self.emit(page, "data_provided", "mounted" if created else "changed")
            except Exception as exc:
                failure = exc
        else:
            await self.provide(page, route, hash)
            await self.transition(page, old)
            if old is not None:
                self.cleanup(old)
            await self.emit(page, "mounted" if created else "changed")
            self._host.refocus()

        self.active_page = page
        self.active_route = route
        self.active_hash = hash

        if self._registry.has_widgets and self._host.widgets:
            await self.update_widgets(page)

        logger.info("[route]: %s", route)
        logger.info("[hash]: %s", hash)

        if failure is not None:
            await self._handle_error(page, failure)
        return page

    # -- TriggerSteps --

    async def fetch(self, page: Any, route: str, hash: str) -> None:
        """Provide url data and run the route's data provider."""
        params = await self.provide(page, route, hash)
        binding = self._registry.provider(route)
        if binding is None:
            return
        await invoke(binding.callback, page, dict(params))

    def stamp(self, page: Any, route: str) -> None:
        """Open the cache window of *page* from now."""
        binding = self._registry.provider(route)
        if binding is not None:
            self.meta.get(page).expires_at = self._clock() + binding.expires_ms

    async def transition(self, page_in: Any, page_out: Any = None) -> None:
        await do_transition(
            self._host,
            self._transitions,
            page_in,
            page_out,
            disabled=self._config.disable_transitions,
        )
        self._shown = page_in

    def cleanup(self, page: Any) -> bool:
        """Destroy *page* if the cleanup policy asks for it.

        Returns True when the page was destroyed: its stack slot holds
        the original constructor again and the host removed it.
        """
        config = self._config
        if KEEP_ALIVE in self._register:
            keep_alive = bool(self._register.read(KEEP_ALIVE))
        else:
            keep_alive = config.keep_alive
        from_history = bool(self._register.read(FLOOR_BACKTRACK) or self._register.read(BACKTRACK))

        destroy = (from_history and (config.destroy_on_history_back or config.lazy_destroy)) or (
            config.lazy_destroy and not keep_alive
        )
        if not destroy:
            return False

        meta = self.meta.peek(page)
        route = None
        slot = self._registry.find_instance(page)
        if slot is not None:
            route, index = slot
            constructor = (meta.constructor if meta is not None else None) or type(page)
            self._registry.replace(route, index, HandlerEntry(HandlerKind.CONSTRUCTOR, constructor))

        self._host.remove(page)
        self.meta.forget(page)
        if config.gc_on_unload:
            self._host.gc()
        logger.debug("destroyed page for route %r", route)
        return True

    def set_state(self, state: str) -> None:
        self._host.set_state(state)

    # -- Page data --

    async def provide(self, page: Any, route: str, hash: str) -> dict[str, Any]:
        """Expose url values and the navigation register on *page*.

        Sets ``page.params`` (url values merged with the register) and,
        when the register is not empty, ``page.persist``.
        """
        params = {**values_from_hash(hash, route), **self._register.as_dict()}
        if len(self._register):
            page.persist = self._register.as_dict()
        page.params = params
        await self.emit(page, "url_params", args=(dict(params),))
        return params

    async def emit(self, target: Any, *events: str, args: tuple[Any, ...] = ()) -> None:
        """Call the optional ``on_<event>`` hooks of *target*.

        ``url_params`` hooks receive the params; the other page events
        take no arguments.
        """
        for event in events:
            hook = getattr(target, f"on_{event}", None)
            if callable(hook):
                await invoke(hook, *args)

    async def update_widgets(self, page: Any) -> None:
        """Toggle widget visibility for the route *page* was loaded on."""
        meta = self.meta.peek(page)
        refs = self._registry.widgets_for(meta.route if meta else None)
        configured = {ref.lower() for ref in refs}
        for widget in self._host.widgets:
            widget.visible = widget.ref.lower() in configured
            if widget.visible:
                await self.emit(widget, "activated", args=(page,))

    # -- Errors --

    async def _handle_error(self, page: Any, error: Exception) -> None:
        meta = self.meta.get(page)
        meta.expires_at = self._clock()

        _, entry = self._registry.page_entry(ERROR_ROUTE)
        if entry is None or meta.route == ERROR_ROUTE:
            logger.error("Data provider failed for route %r", meta.route, exc_info=error)
            return

        error_page = await self._load(ERROR_ROUTE, meta.hash or "", self._shown)
        error_page.error = DataProviderFailure(page, error)

        # on() loading leaves the app in the loading state
        if self._host.state == LOADING_STATE:
            self._host.set_state(IDLE_STATE)

        if self.active_page is not error_page:
            self.active_page = error_page
            self._host.refocus()
