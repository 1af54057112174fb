"""Location — where the current hash is read from and written to.

In a browser this is ``document.location.hash``. Non-browser hosts
supply their own reader and writer, either by implementing
``Location`` or by wrapping two callables in ``CallbackLocation``.

Writing the location is how the router asks for a navigation to be
processed: ``MemoryLocation.set_hash`` notifies its subscribers, and
the router subscribes its hash-change handler at construction time.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable
from urllib.parse import parse_qsl

from waypoint._internal.invoke import invoke

HashListener = Callable[[], Awaitable[Any]]


@runtime_checkable
class Location(Protocol):
    def get_hash(self) -> str: ...

    async def set_hash(self, url: str) -> None: ...


class MemoryLocation:
    """In-process location with an async change signal.

    Every ``set_hash`` stores the new value and then awaits each
    subscriber in subscription order, the way a ``hashchange`` event
    would fire in a browser.
    """

    __slots__ = ("_hash", "_listeners")

    def __init__(self, initial: str = "") -> None:
        self._hash = initial
        self._listeners: list[HashListener] = []

    def get_hash(self) -> str:
        return self._hash

    async def set_hash(self, url: str) -> None:
        self._hash = url
        for listener in list(self._listeners):
            await listener()

    def subscribe(self, listener: HashListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class CallbackLocation:
    """Adapt a ``get_hash`` / ``set_hash`` pair of callables.

    *set_hash* may be sync or async. The host is responsible for
    calling ``Router.handle_hash_change()`` when the location changes,
    including after a write made through this adapter.
    """

    __slots__ = ("_get", "_set")

    def __init__(self, get_hash: Callable[[], str], set_hash: Callable[[str], Any]) -> None:
        self._get = get_hash
        self._set = set_hash

    def get_hash(self) -> str:
        return self._get()

    async def set_hash(self, url: str) -> None:
        await invoke(self._set, url)


def query_params(hash: str) -> dict[str, str]:
    """Query-string parameters trailing a hash (``#home?lang=nl``).

    Only consumed at boot; routing ignores the query part.
    """
    _, sep, query = hash.partition("?")
    if not sep:
        return {}
    return dict(parse_qsl(query, keep_blank_values=True))
