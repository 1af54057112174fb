"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Page object — owned by the host, opaque to the router
Page: TypeAlias = Any

# Provider callback — receives (page, params), may be sync or async
ProviderCallback: TypeAlias = Callable[..., Any]

# Route callback — receives (router, params), no page lifecycle
RouteCallback: TypeAlias = Callable[..., Any]

# Millisecond clock
Clock: TypeAlias = Callable[[], float]
