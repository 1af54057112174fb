"""Navigation history — most-recent-last stack of stored hashes."""

from collections.abc import Iterator


class HistoryStack:
    """Stack of previously visited hashes.

    Pushing a hash that is already stored moves it to the end, so the
    stack reflects recency instead of growing with every revisit. With
    ``store_duplicates`` the hash is appended regardless::

        history = HistoryStack()
        history.push("a"); history.push("b"); history.push("a")
        list(history)  # ["b", "a"]
    """

    __slots__ = ("_entries", "store_duplicates")

    def __init__(self, *, store_duplicates: bool = False) -> None:
        self._entries: list[str] = []
        self.store_duplicates = store_duplicates

    def push(self, hash: str) -> None:
        hash = hash.lstrip("#").removeprefix("/")
        if self.store_duplicates or hash not in self._entries:
            self._entries.append(hash)
            return
        self._entries.remove(hash)
        self._entries.append(hash)

    def pop(self) -> str | None:
        """Remove and return the most recent hash, ``None`` when empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"HistoryStack({self._entries!r})"
