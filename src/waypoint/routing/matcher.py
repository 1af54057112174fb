"""Hash matcher — resolve a location hash to a registered route pattern.

Matching works floor by floor: only patterns with the same number of
segments as the hash are considered. Inline regex segments are pulled
out into a side table before splitting so their expressions never
interfere with segment boundaries.
"""

from collections.abc import Iterable
from urllib.parse import unquote

from waypoint.routing.pattern import (
    REGEX_PLACEHOLDER,
    SKIP_ROUTES,
    extract_regex,
    get_floor,
    is_named,
    split_segments,
)


def routes_by_floor(routes: Iterable[str], floor: int) -> list[str]:
    """Return all routes that live on *floor*."""
    return [route for route in routes if get_floor(route) == floor]


def _specificity(route: str) -> tuple[int, ...]:
    # Literal and regex segments sort before named segments
    rewritten, _ = extract_regex(route)
    return tuple(1 if is_named(segment) else 0 for segment in split_segments(rewritten))


def matches(route: str, hash: str) -> bool:
    """True when every segment of *route* accepts the matching hash segment.

    Regex segments must match the whole hash segment, named segments
    always match, literal segments compare case-insensitively.
    """
    rewritten, store = extract_regex(route)
    route_parts = split_segments(rewritten)
    hash_parts = split_segments(hash)
    if len(route_parts) != len(hash_parts):
        return False

    for route_part, hash_part in zip(route_parts, hash_parts, strict=True):
        placeholder = REGEX_PLACEHOLDER.match(route_part)
        if placeholder is not None:
            regex = store[int(placeholder.group(1))].compile()
            if regex.fullmatch(hash_part) is None:
                return False
        elif is_named(route_part):
            continue
        elif route_part.lower() != hash_part.lower():
            return False
    return True


def route_by_hash(routes: Iterable[str], hash: str) -> str | None:
    """Return the best matching route for *hash*, or ``None``.

    ``home/browse/12`` matches ``home/browse/:categoryId``; when
    ``home/browse/new`` is also registered, the static route wins for
    ``home/browse/new``. Reserved patterns (``!``, ``*``, ``$``) are
    never candidates.
    """
    candidates = [
        route
        for route in routes_by_floor(routes, get_floor(hash))
        if route not in SKIP_ROUTES and matches(route, hash)
    ]
    if not candidates:
        return None
    return sorted(candidates, key=_specificity)[0]


def values_from_hash(hash: str, route: str) -> dict[str, str]:
    """Extract named-parameter values from *hash* for the matched *route*.

    ``values_from_hash("cat/42", "cat/:id") == {"id": "42"}``. Values are
    percent-decoded.
    """
    rewritten, _ = extract_regex(route)
    route_parts = split_segments(rewritten)
    hash_parts = split_segments(hash)
    values: dict[str, str] = {}
    for route_part, hash_part in zip(route_parts, hash_parts, strict=False):
        if is_named(route_part):
            values[route_part[1:]] = unquote(hash_part)
    return values
