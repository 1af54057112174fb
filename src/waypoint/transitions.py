"""Transition dispatch — resolve and await a page transition.

Pages opt into transitions with a ``page_transition`` attribute::

    class DetailPage:
        def page_transition(self, page_in, page_out):
            return "left"          # a named effect
            # or: return some_coroutine  (awaited as-is)

Named effects are looked up in a ``TransitionRegistry``. The built-in
effects delegate to ``host.animate(effect, page_in, page_out)`` when
the host has it and fall back to a plain visibility toggle otherwise.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint.errors import TransitionFailure
from waypoint.host import ViewHost

logger = logging.getLogger("waypoint.transitions")

DEFAULT_TRANSITION = "crossFade"

TransitionFn = Callable[[ViewHost, Any, Any], Awaitable[None]]


def toggle(host: ViewHost, page_in: Any, page_out: Any = None) -> None:
    """Show *page_in*, hide *page_out*. The default, effect-free transition."""
    host.set_visible(page_in, True)
    if page_out is not None:
        host.set_visible(page_out, False)


def _effect(name: str) -> TransitionFn:
    async def run(host: ViewHost, page_in: Any, page_out: Any = None) -> None:
        animate = getattr(host, "animate", None)
        if animate is None:
            toggle(host, page_in, page_out)
            return
        await invoke(animate, name, page_in, page_out)

    run.__name__ = name
    return run


BUILTIN_EFFECTS: tuple[str, ...] = ("crossFade", "fade", "left", "right", "up", "down")


class TransitionRegistry:
    """Named transition effects.

    Starts with the built-in effects; ``register()`` adds or replaces
    one::

        transitions = TransitionRegistry()
        transitions.register("zoom", zoom_effect)
    """

    __slots__ = ("_effects",)

    def __init__(self) -> None:
        self._effects: dict[str, TransitionFn] = {name: _effect(name) for name in BUILTIN_EFFECTS}

    def register(self, name: str, effect: TransitionFn) -> None:
        self._effects[name] = effect

    def get(self, name: str) -> TransitionFn | None:
        return self._effects.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._effects


async def do_transition(
    host: ViewHost,
    registry: TransitionRegistry,
    page_in: Any,
    page_out: Any = None,
    *,
    disabled: bool = False,
) -> None:
    """Run the transition from *page_out* to *page_in* and wait for it.

    A ``page_transition`` that raises is logged and replaced by the
    default cross-fade; the error never reaches the caller.
    """
    resolver = getattr(page_in, "page_transition", None)
    if resolver is None or disabled:
        toggle(host, page_in, page_out)
        return

    try:
        kind = resolver(page_in, page_out)
        if inspect.isawaitable(kind):
            await kind
            return
    except Exception as exc:
        failure = TransitionFailure(f"page_transition of {type(page_in).__name__} raised: {exc}")
        logger.warning("%s; using %s", failure, DEFAULT_TRANSITION)
        kind = DEFAULT_TRANSITION

    effect = registry.get(kind) if isinstance(kind, str) else None
    if effect is None:
        effect = registry.get(DEFAULT_TRANSITION)
    await effect(host, page_in, page_out)
