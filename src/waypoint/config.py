"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups at navigation time.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from waypoint.errors import ConfigurationError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(key: str) -> str:
    """``destroyOnHistoryBack`` -> ``destroy_on_history_back``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(lazy_create=True, lazy_destroy=True)
    """

    # Page creation / destruction
    lazy_create: bool = False  # Store constructors, instantiate on first match
    lazy_destroy: bool = False  # Destroy the outgoing page after every transition
    destroy_on_history_back: bool = False  # Destroy the outgoing page on step(-1)
    keep_alive: bool = False  # Default for the per-navigation ``keepAlive`` flag
    gc_on_unload: bool = False  # Ask the host to reclaim memory right after destroy

    # Transitions
    disable_transitions: bool = False

    # Location / history
    update_hash: bool = True  # Write the external location on navigate
    store_same_hash: bool = False  # Append duplicate hashes instead of reordering
    backtrack: bool = False  # Floor-backtrack when history is empty

    # Input
    number_navigation: bool = False
    auto_restore_remote: bool = False

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "RouterConfig":
        """Build a config from platform settings.

        Accepts the camelCase names used in platform settings files
        (``lazyCreate``, ``destroyOnHistoryBack``, ...) as well as the
        field names themselves. Unknown keys raise ``ConfigurationError``.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in settings.items():
            name = snake_case(key)
            if name not in known:
                msg = f"Unknown router setting {key!r}"
                raise ConfigurationError(msg)
            values[name] = bool(value)
        return cls(**values)
