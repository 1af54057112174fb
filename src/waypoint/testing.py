"""Test helpers for waypoint applications.

``MemoryHost`` implements the ``ViewHost`` protocol in memory and
records what the router asked of it, so routing behaviour can be
tested without a GUI toolkit::

    host = MemoryHost(widgets=[MemoryWidget("Menu")])
    router = Router(host)
    router.route("home", HomePage)
    await router.navigate("home")
    assert host.visible(router.active_page)
"""

from dataclasses import dataclass, field
from typing import Any

import anyio


@dataclass(slots=True)
class MemoryWidget:
    """A widget with a ref and a visibility flag."""

    ref: str
    visible: bool = False
    activations: list[Any] = field(default_factory=list)

    def on_activated(self, page: Any) -> None:
        self.activations.append(page)


class RecordingPage:
    """Page base class that records the lifecycle events it receives.

    ``events`` lists event names in arrival order; ``url_params`` holds
    the params of the last ``url_params`` event.
    """

    def __init__(self) -> None:
        self.events: list[str] = []
        self.url_params: dict[str, Any] = {}

    def on_url_params(self, params: dict[str, Any]) -> None:
        self.events.append("url_params")
        self.url_params = params

    def on_data_provided(self) -> None:
        self.events.append("data_provided")

    def on_mounted(self) -> None:
        self.events.append("mounted")

    def on_changed(self) -> None:
        self.events.append("changed")


class MemoryHost:
    """In-memory ``ViewHost``.

    ``log`` records ``(action, subject)`` tuples for every call, in
    order: ``create``, ``attach``, ``remove``, ``show``, ``hide``,
    ``state``, ``refocus``, ``gc``, ``animate``, ``close``.
    """

    def __init__(self, widgets: list[MemoryWidget] | None = None) -> None:
        self._widgets: list[MemoryWidget] = list(widgets or [])
        self._attached: list[Any] = []
        self._visible: set[int] = set()
        self.state = ""
        self.state_args: tuple[Any, ...] = ()
        self.log: list[tuple[str, Any]] = []
        self.closed = False

    @property
    def widgets(self) -> list[MemoryWidget]:
        return self._widgets

    def create(self, page_type: type) -> Any:
        page = page_type()
        self.log.append(("create", page_type))
        return page

    def attach(self, page: Any) -> None:
        if not self.is_attached(page):
            self._attached.append(page)
        self.log.append(("attach", page))

    def remove(self, page: Any) -> None:
        self._attached = [p for p in self._attached if p is not page]
        self._visible.discard(id(page))
        self.log.append(("remove", page))

    def is_attached(self, page: Any) -> bool:
        return any(p is page for p in self._attached)

    def set_visible(self, page: Any, visible: bool) -> None:
        if visible:
            self._visible.add(id(page))
        else:
            self._visible.discard(id(page))
        self.log.append(("show" if visible else "hide", page))

    def visible(self, page: Any) -> bool:
        return id(page) in self._visible

    def set_state(self, state: str, *args: Any) -> None:
        self.state = state
        self.state_args = args
        self.log.append(("state", state))

    def refocus(self) -> None:
        self.log.append(("refocus", None))

    def gc(self) -> None:
        self.log.append(("gc", None))

    async def animate(self, effect: str, page_in: Any, page_out: Any = None) -> None:
        self.log.append(("animate", effect))
        self.set_visible(page_in, True)
        if page_out is not None:
            self.set_visible(page_out, False)

    def actions(self, action: str) -> list[Any]:
        """Subjects logged for *action*, in order."""
        return [subject for name, subject in self.log if name == action]

    @property
    def attached(self) -> list[Any]:
        return list(self._attached)

    def handle_app_close(self) -> None:
        self.closed = True
        self.log.append(("close", None))


class Gate:
    """Awaitable checkpoint for ordering concurrent navigations in tests.

    Create it inside a running event loop::

        gate = Gate()

        async def slow_fetch(page, params):
            await gate.wait()

        ...
        gate.open()
    """

    def __init__(self) -> None:
        self._event = anyio.Event()

    def open(self) -> None:
        self._event.set()

    @property
    def is_open(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()
