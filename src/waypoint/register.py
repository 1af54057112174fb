"""Navigation register — per-navigation arguments for the next page."""

from collections.abc import Iterator, Mapping
from typing import Any

# Flags the router itself reads from the register
RELOAD = "reload"
KEEP_ALIVE = "keepAlive"
BACKTRACK = "backtrack"
FLOOR_BACKTRACK = "@router:backtrack"
RESUME = "resume"


class NavigationRegister:
    """Transient key-value map attached to the current ``navigate`` call.

    Cleared at the start of every navigation. The next page receives
    its contents as ``persist`` and merged into ``params``.
    """

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def reset(self, values: Mapping[str, Any] | None = None) -> None:
        self._values = dict(values or {})

    def read(self, flag: str) -> Any:
        """Value stored under *flag*, or ``False`` when absent."""
        return self._values.get(flag, False)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
