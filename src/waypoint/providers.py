"""Data provider trigger protocol.

A provider binding ties a data-fetch callback to a route. Its trigger
decides how fetching is ordered relative to the visual transition:

- ``before``  fetch, then transition, then clean up the old page.
  The old page stays visible until the data is ready.
- ``after``   transition, clean up the old page, then fetch. The new
  page shows its own loading state.
- ``on``      force the app into the ``Loading`` state, clean up the
  old page, fetch, transition, then leave ``Loading``. An old page
  destroyed by the cleanup is not handed to the transition.

Each trigger is an explicit ``async`` procedure; the ordering of the
awaited steps is the contract. Every trigger ends by stamping the
expiry, so the cache window opens once the page is on screen with its
data.
"""

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from waypoint.errors import UnsupportedTriggerType

LOADING_STATE = "Loading"
IDLE_STATE = ""


class TriggerType(enum.StrEnum):
    ON = "on"
    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True, slots=True)
class ProviderBinding:
    """A data provider bound to a route.

    ``trigger`` is kept as given; unknown names fail when the route is
    loaded, not at registration.
    """

    callback: Callable[..., Any]
    expires_ms: int = 0
    trigger: str = TriggerType.ON


@dataclass(frozen=True, slots=True)
class Transfer:
    """The pages and location involved in one provider-backed load."""

    page: Any
    old: Any
    route: str
    hash: str


class TriggerSteps(Protocol):
    """The lifecycle operations a trigger procedure sequences."""

    async def fetch(self, page: Any, route: str, hash: str) -> None: ...

    async def transition(self, page_in: Any, page_out: Any = None) -> None: ...

    def cleanup(self, page: Any) -> bool: ...

    def stamp(self, page: Any, route: str) -> None: ...

    def set_state(self, state: str) -> None: ...


async def trigger_before(steps: TriggerSteps, transfer: Transfer) -> None:
    await steps.fetch(transfer.page, transfer.route, transfer.hash)
    await steps.transition(transfer.page, transfer.old)
    if transfer.old is not None:
        steps.cleanup(transfer.old)
    steps.stamp(transfer.page, transfer.route)


async def trigger_after(steps: TriggerSteps, transfer: Transfer) -> None:
    await steps.transition(transfer.page, transfer.old)
    if transfer.old is not None:
        steps.cleanup(transfer.old)
    await steps.fetch(transfer.page, transfer.route, transfer.hash)
    steps.stamp(transfer.page, transfer.route)


async def trigger_on(steps: TriggerSteps, transfer: Transfer) -> None:
    old = transfer.old
    steps.set_state(LOADING_STATE)
    try:
        if old is not None and steps.cleanup(old):
            old = None
        await steps.fetch(transfer.page, transfer.route, transfer.hash)
        await steps.transition(transfer.page, old)
        steps.stamp(transfer.page, transfer.route)
    finally:
        steps.set_state(IDLE_STATE)


TRIGGERS: dict[str, Callable[[TriggerSteps, Transfer], Awaitable[None]]] = {
    TriggerType.ON: trigger_on,
    TriggerType.AFTER: trigger_after,
    TriggerType.BEFORE: trigger_before,
}


def get_trigger(name: str) -> Callable[[TriggerSteps, Transfer], Awaitable[None]]:
    """Return the procedure for trigger *name*.

    Raises ``UnsupportedTriggerType`` for names outside ``TriggerType``.
    """
    try:
        return TRIGGERS[name]
    except KeyError:
        raise UnsupportedTriggerType(str(name)) from None
