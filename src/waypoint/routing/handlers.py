"""Handler stack entries.

A route's handler stack holds four kinds of entry. The kind is decided
once, at registration time, by ``classify()``; everything downstream
matches on ``HandlerKind`` instead of inspecting the object again.

- ``INSTANCE``     a live page object
- ``CONSTRUCTOR``  a page type, instantiated by the host on load
- ``ASYNC_LOADER`` a factory returning an awaitable page type
- ``CALLBACK``     a plain function, called without page lifecycle
"""

import enum
import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from waypoint.errors import AsyncComponentRegistrationMisuse


class HandlerKind(enum.Enum):
    INSTANCE = "instance"
    CONSTRUCTOR = "constructor"
    ASYNC_LOADER = "async_loader"
    CALLBACK = "callback"


@dataclass(frozen=True, slots=True)
class AsyncLoader:
    """Descriptor for a lazily imported page type.

    ``loader`` is a zero-argument callable returning an awaitable that
    resolves to a page type (or a module-like object with a ``default``
    attribute holding one)::

        router.route("settings", AsyncLoader(load_settings_page))
    """

    loader: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class HandlerEntry:
    """A classified entry in a route's handler stack."""

    kind: HandlerKind
    target: Any

    @property
    def is_page(self) -> bool:
        """True for entries that carry a page (everything but callbacks)."""
        return self.kind is not HandlerKind.CALLBACK

    @property
    def name(self) -> str:
        if self.kind is HandlerKind.ASYNC_LOADER:
            target = self.target.loader
        elif self.kind is HandlerKind.INSTANCE:
            target = type(self.target)
        else:
            target = self.target
        return getattr(target, "__qualname__", None) or repr(target)


def _is_plain_callable(obj: Any) -> bool:
    return (
        inspect.isfunction(obj)
        or inspect.ismethod(obj)
        or inspect.isbuiltin(obj)
        or isinstance(obj, functools.partial)
    )


def classify(handler: Any, path: str = "") -> HandlerEntry:
    """Wrap *handler* in a ``HandlerEntry`` of the right kind.

    Raises ``AsyncComponentRegistrationMisuse`` when an ``AsyncLoader``
    wraps a page type or something that isn't callable.
    """
    if isinstance(handler, HandlerEntry):
        return handler
    if isinstance(handler, AsyncLoader):
        if isinstance(handler.loader, type) or not callable(handler.loader):
            raise AsyncComponentRegistrationMisuse(path)
        return HandlerEntry(HandlerKind.ASYNC_LOADER, handler)
    if isinstance(handler, type):
        return HandlerEntry(HandlerKind.CONSTRUCTOR, handler)
    if _is_plain_callable(handler):
        return HandlerEntry(HandlerKind.CALLBACK, handler)
    return HandlerEntry(HandlerKind.INSTANCE, handler)
