"""Route registry — pattern → handler stack, plus per-route extras.

Holds everything registered during setup: handler stacks, route
modifiers, widget visibility lists and data-provider bindings. All
lookups are keyed by the normalized pattern (trailing slashes
stripped).
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from waypoint.config import snake_case
from waypoint.errors import ConfigurationError, RegistrationConflict
from waypoint.providers import ProviderBinding
from waypoint.routing.handlers import HandlerEntry, HandlerKind, classify
from waypoint.routing.pattern import normalize

logger = logging.getLogger("waypoint.router")


@dataclass(frozen=True, slots=True)
class RouteModifiers:
    """Per-route history flags.

    ``store`` is tri-state: ``None`` means "not configured", an
    explicit ``False`` keeps the route out of history just like
    ``prevent_storage``.
    """

    prevent_storage: bool = False
    clear_history: bool = False
    store_last: bool = False
    store: bool | None = None

    @classmethod
    def coerce(cls, value: "RouteModifiers | Mapping[str, Any] | None") -> "RouteModifiers | None":
        """Accept a ``RouteModifiers`` or a mapping in snake_case or camelCase."""
        if value is None or isinstance(value, RouteModifiers):
            return value
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, flag in value.items():
            name = snake_case(key)
            if name not in known:
                msg = f"Unknown route modifier {key!r}"
                raise ConfigurationError(msg)
            kwargs[name] = flag
        return cls(**kwargs)


class RouteRegistry:
    """Mutable registry of routes and their bindings.

    Usage::

        registry = RouteRegistry()
        registry.register_route("home", HomePage)
        registry.register_provider("home", fetch_home, 30, "before")
        index, entry = registry.page_entry("home")
    """

    __slots__ = ("_materialize", "_modifiers", "_providers", "_stacks", "_widgets", "conflicts")

    def __init__(self, materialize: Callable[[HandlerEntry], HandlerEntry] | None = None) -> None:
        # Called on page-bearing entries at registration; None = lazy create
        self._materialize = materialize
        self._stacks: dict[str, list[HandlerEntry]] = {}
        self._modifiers: dict[str, RouteModifiers] = {}
        self._widgets: dict[str, tuple[str, ...]] = {}
        self._providers: dict[str, ProviderBinding] = {}
        self.conflicts: list[RegistrationConflict] = []

    # -- Registration --

    def register_route(
        self,
        pattern: str,
        handler: Any,
        modifiers: RouteModifiers | Mapping[str, Any] | None = None,
    ) -> HandlerEntry | None:
        """Add *handler* to the stack for *pattern*.

        Returns the stored entry, or ``None`` when the registration was
        rejected because the route already carries a page.
        """
        route = normalize(pattern)
        entry = classify(handler, route)
        stack = self._stacks.get(route)

        if stack is None:
            self._stacks[route] = [self._create(entry)]
            coerced = RouteModifiers.coerce(modifiers)
            if coerced is not None:
                self._modifiers[route] = coerced
            return self._stacks[route][0]

        if any(e.is_page for e in stack) and entry.is_page:
            self._conflict(f"Page for route({route!r}) already exists")
            return None

        entry = self._create(entry)
        stack.append(entry)
        return entry

    def register_widgets(self, pattern: str, widgets: str | Iterable[str] = ()) -> None:
        """Define the widgets that become visible while *pattern* is active."""
        route = normalize(pattern)
        if route in self._widgets:
            self._conflict(f"Widgets already exist for {route}")
            return
        refs = (widgets,) if isinstance(widgets, str) else tuple(widgets)
        self._widgets[route] = refs

    def register_provider(
        self,
        pattern: str,
        callback: Callable[..., Any],
        expires: float = 0,
        trigger: str = "on",
    ) -> None:
        """Bind a data provider to *pattern*. *expires* is in seconds."""
        route = normalize(pattern)
        if route in self._providers:
            self._conflict(f"provider for {route} already exists")
            return
        self._providers[route] = ProviderBinding(
            callback=callback,
            expires_ms=int(expires * 1000),
            trigger=trigger,
        )

    # -- Queries --

    @property
    def patterns(self) -> list[str]:
        """All registered patterns, in registration order."""
        return list(self._stacks)

    def has(self, route: str) -> bool:
        return route in self._stacks

    def stack(self, route: str) -> list[HandlerEntry]:
        return list(self._stacks.get(route, ()))

    def page_entry(self, route: str) -> tuple[int, HandlerEntry | None]:
        """Index and entry of the page-bearing handler for *route*.

        Returns ``(-1, None)`` when the route has no page.
        """
        for index, entry in enumerate(self._stacks.get(route, ())):
            if entry.is_page:
                return index, entry
        return -1, None

    def replace(self, route: str, index: int, entry: HandlerEntry) -> None:
        """Swap the entry at *index* (page creation and destruction)."""
        self._stacks[route][index] = entry

    def find_instance(self, page: Any) -> tuple[str, int] | None:
        """Route and stack index holding *page*, if any."""
        for route, stack in self._stacks.items():
            for index, entry in enumerate(stack):
                if entry.kind is HandlerKind.INSTANCE and entry.target is page:
                    return route, index
        return None

    def modifiers(self, route: str | None) -> RouteModifiers | None:
        if route is None:
            return None
        return self._modifiers.get(route)

    def widgets_for(self, route: str | None) -> tuple[str, ...]:
        if route is None:
            return ()
        return self._widgets.get(route, ())

    @property
    def has_widgets(self) -> bool:
        return bool(self._widgets)

    def provider(self, route: str) -> ProviderBinding | None:
        return self._providers.get(route)

    # -- Internal --

    def _create(self, entry: HandlerEntry) -> HandlerEntry:
        if self._materialize is not None and entry.kind in (
            HandlerKind.CONSTRUCTOR,
            HandlerKind.INSTANCE,
        ):
            return self._materialize(entry)
        return entry

    def _conflict(self, message: str) -> None:
        self.conflicts.append(RegistrationConflict(message))
        logger.warning("RegistrationConflict: %s", message)
