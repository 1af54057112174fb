"""Route pattern parsing helpers.

Route syntax::

    "home"                      literal segment
    "home/browse/:categoryId"   named parameter
    "player/{/[0-9]+/}"         inline regular expression
    "search/{/[a-z]+/i}/:page"  regex with flags (``i``, ``g``, ``m``)

Reserved patterns: ``*`` (catch-all), ``!`` (error page), ``$``
(reserved) and ``@boot-page`` (boot route).
"""

import re
from dataclasses import dataclass

ERROR_ROUTE = "!"
CATCH_ALL_ROUTE = "*"
RESERVED_ROUTE = "$"
BOOT_ROUTE = "@boot-page"

# Never considered as hash-matching candidates
SKIP_ROUTES: frozenset[str] = frozenset({ERROR_ROUTE, CATCH_ALL_ROUTE, RESERVED_ROUTE})

INLINE_REGEX = re.compile(r"\{/(.*?)/([igm]{0,3})\}")
NAMED_SEGMENT = re.compile(r"^:([\w-]+)$")
REGEX_PLACEHOLDER = re.compile(r"^@@(\d+)@@$")

_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "g": 0}


@dataclass(frozen=True, slots=True)
class InlineRegex:
    """An inline ``{/expr/flags}`` segment pulled out of a route."""

    expression: str
    flags: str = ""

    def compile(self) -> re.Pattern[str]:
        value = 0
        for flag in self.flags:
            value |= _FLAGS[flag]
        return re.compile(self.expression, value)


def normalize(pattern: str) -> str:
    """Registry key for *pattern*: trailing slashes stripped."""
    return pattern.rstrip("/")


def strip_hash(hash: str) -> str:
    """Drop a leading ``#``, a trailing query string and surrounding slashes."""
    hash = hash.lstrip("#")
    hash = hash.split("?", 1)[0]
    return hash.strip("/")


def strip_regex(route: str, char: str = "R") -> str:
    """Replace every inline regex in *route* with *char*.

    Collapsing a regex to a single token simplifies floor calculation
    and backtracking, since the expression itself may contain ``/``.
    """
    return INLINE_REGEX.sub(char, route)


def extract_regex(route: str) -> tuple[str, list[InlineRegex]]:
    """Swap inline regexes for indexed ``@@n@@`` placeholders.

    Returns the rewritten route and the side table of expressions,
    indexed by placeholder number.
    """
    store: list[InlineRegex] = []

    def _replace(match: re.Match[str]) -> str:
        store.append(InlineRegex(expression=match.group(1), flags=match.group(2)))
        return f"@@{len(store) - 1}@@"

    return INLINE_REGEX.sub(_replace, route), store


def split_segments(value: str) -> list[str]:
    """Split a route or hash into its ``/``-delimited segments."""
    value = strip_hash(value)
    if not value:
        return []
    return value.split("/")


def get_floor(route: str) -> int:
    """Segment-count depth of a route or hash.

    ``get_floor("/a/b/c") == 3``. Inline regexes count as one segment.
    """
    return len(split_segments(strip_regex(route)))


def is_named(segment: str) -> bool:
    return NAMED_SEGMENT.match(segment) is not None
