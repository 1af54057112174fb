"""ViewHost protocol — the GUI collaborator the router drives.

The router never renders. It asks the host to create, attach, show,
hide and remove page objects, to switch the application's focus state
and to reclaim memory. Any GUI toolkit (or a test double, see
``waypoint.testing.MemoryHost``) can sit behind this protocol.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Widget(Protocol):
    """A peripheral view (menu, header, ...) shown per route."""

    ref: str
    visible: bool


@runtime_checkable
class ViewHost(Protocol):
    """Page host and application shell.

    Optional capabilities, looked up with ``getattr``:

    - ``animate(effect, page_in, page_out)`` — awaitable named effect
    - ``handle_app_close()`` — called when ``step(-1)`` has nowhere to go
    """

    @property
    def widgets(self) -> Sequence[Widget]: ...

    @property
    def state(self) -> str: ...

    def create(self, page_type: type) -> Any: ...

    def attach(self, page: Any) -> None: ...

    def remove(self, page: Any) -> None: ...

    def is_attached(self, page: Any) -> bool: ...

    def set_visible(self, page: Any, visible: bool) -> None: ...

    def set_state(self, state: str, *args: Any) -> None: ...

    def refocus(self) -> None: ...

    def gc(self) -> None: ...
