"""Invoke helpers — call sync or async callbacks uniformly.

Provider callbacks, page event hooks, route callbacks and loaders can
be ``def`` or ``async def``. Any code that calls a user-provided
callable goes through this helper so the sync/async check lives in
exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(callback, page, params)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync — returns immediately, no await needed
        def fetch_home(page, params):
            page.items = CACHE["home"]

        # async — returns coroutine, awaited automatically
        async def fetch_home(page, params):
            page.items = await api.home()
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
