"""Identity-keyed page metadata."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class PageMeta:
    """Router bookkeeping for one page instance.

    ``expires_at`` is epoch milliseconds; ``None`` means the page's data
    never expires. ``constructor`` is the type restored into the stack
    slot when the page is destroyed.
    """

    route: str | None = None
    hash: str | None = None
    expires_at: float | None = None
    constructor: type | None = None


class PageMetaTable:
    """Map from page identity to ``PageMeta``.

    Keyed by ``id()`` with a strong reference to the page, so pages that
    define ``__eq__``/``__hash__`` (or are unhashable) are still tracked
    by identity and ids are never reused while an entry is alive.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Any, PageMeta]] = {}

    def get(self, page: Any) -> PageMeta:
        """Metadata for *page*, created on first access."""
        entry = self._entries.get(id(page))
        if entry is None:
            entry = (page, PageMeta())
            self._entries[id(page)] = entry
        return entry[1]

    def peek(self, page: Any) -> PageMeta | None:
        """Metadata for *page* without creating it."""
        entry = self._entries.get(id(page))
        return entry[1] if entry is not None else None

    def forget(self, page: Any) -> None:
        self._entries.pop(id(page), None)

    def __contains__(self, page: object) -> bool:
        return id(page) in self._entries

    def __iter__(self) -> Iterator[Any]:
        return (page for page, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
