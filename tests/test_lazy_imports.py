"""Tests for the top-level waypoint API — lazy exports resolve to the routing types."""

import importlib

import pytest

import waypoint
from waypoint.routing.handlers import HandlerKind
from waypoint.testing import MemoryHost


@pytest.mark.parametrize(("name", "module_path"), sorted(waypoint._LAZY_IMPORTS.items()))
def test_export_is_defining_module_object(name: str, module_path: str) -> None:
    assert getattr(waypoint, name) is getattr(importlib.import_module(module_path), name)


def test_all_matches_lazy_registry() -> None:
    assert sorted(waypoint.__all__) == sorted(waypoint._LAZY_IMPORTS)


def test_unknown_name_names_the_package() -> None:
    with pytest.raises(AttributeError, match="'waypoint' has no attribute 'Navigator'"):
        waypoint.__getattr__("Navigator")


@pytest.mark.parametrize(
    "name",
    [
        "AsyncComponentRegistrationMisuse",
        "ConfigurationError",
        "DataProviderFailure",
        "RegistrationConflict",
        "RouteNotFound",
        "TransitionFailure",
        "UnsupportedTriggerType",
    ],
)
def test_errors_share_the_root(name: str) -> None:
    assert issubclass(getattr(waypoint, name), waypoint.WaypointError)


class TestTopLevelRouting:
    def test_async_loader_registers_as_loader(self) -> None:
        async def load() -> type:
            return object

        router = waypoint.Router(MemoryHost(), waypoint.RouterConfig(lazy_create=True))
        router.route("settings", waypoint.AsyncLoader(load))
        _, entry = router.registry.page_entry("settings")
        assert entry.kind is HandlerKind.ASYNC_LOADER

    def test_route_modifiers_from_platform_names(self) -> None:
        modifiers = waypoint.RouteModifiers.coerce({"preventStorage": True})
        assert modifiers == waypoint.RouteModifiers(prevent_storage=True)

    def test_memory_host_is_a_view_host(self) -> None:
        assert isinstance(MemoryHost(), waypoint.ViewHost)

    def test_trigger_names(self) -> None:
        assert [t.value for t in waypoint.TriggerType] == ["on", "before", "after"]
