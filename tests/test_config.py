"""Tests for waypoint.config — RouterConfig defaults and platform settings."""

import pytest

from waypoint.config import RouterConfig, snake_case
from waypoint.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        config = RouterConfig()
        assert config.lazy_create is False
        assert config.lazy_destroy is False
        assert config.update_hash is True
        assert config.store_same_hash is False
        assert config.backtrack is False

    def test_frozen(self) -> None:
        config = RouterConfig()
        with pytest.raises(AttributeError):
            config.lazy_create = True  # type: ignore[misc]


class TestFromMapping:
    def test_camel_case_keys(self) -> None:
        config = RouterConfig.from_mapping(
            {"lazyCreate": True, "destroyOnHistoryBack": True, "gcOnUnload": 1}
        )
        assert config.lazy_create is True
        assert config.destroy_on_history_back is True
        assert config.gc_on_unload is True

    def test_field_names(self) -> None:
        assert RouterConfig.from_mapping({"update_hash": False}).update_hash is False

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError, match="stageWidth"):
            RouterConfig.from_mapping({"stageWidth": 1920})


def test_snake_case() -> None:
    assert snake_case("autoRestoreRemote") == "auto_restore_remote"
    assert snake_case("backtrack") == "backtrack"
