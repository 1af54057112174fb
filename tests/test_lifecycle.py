"""Tests for waypoint.pages — page creation, reuse, expiry, cleanup and errors."""

import types
from typing import Any

import pytest

from waypoint.errors import DataProviderFailure, RouteNotFound
from waypoint.pages.metadata import PageMetaTable
from waypoint.routing.handlers import AsyncLoader, HandlerKind
from waypoint.testing import RecordingPage


class HomePage(RecordingPage):
    pass


class DetailPage(RecordingPage):
    pass


class ErrorPage(RecordingPage):
    pass


class Unhashable:
    __hash__ = None  # type: ignore[assignment]

    def __eq__(self, other: object) -> bool:
        return True


class TestPageMetaTable:
    def test_identity_keyed(self) -> None:
        table = PageMetaTable()
        a, b = Unhashable(), Unhashable()
        table.get(a).hash = "a"
        table.get(b).hash = "b"
        assert table.get(a).hash == "a"
        assert len(table) == 2

    def test_peek_and_forget(self) -> None:
        table = PageMetaTable()
        page = object()
        assert table.peek(page) is None
        table.get(page)
        assert page in table
        table.forget(page)
        assert table.peek(page) is None


class TestExpiry:
    def test_unset_never_expires(self, make_router, clock) -> None:
        router = make_router()
        page = HomePage()
        assert router.is_page_expired(page) is False
        router.pages.meta.get(page)
        assert router.is_page_expired(page) is False

    def test_past_expiry(self, make_router, clock) -> None:
        router = make_router()
        page = HomePage()
        router.pages.meta.get(page).expires_at = clock.now - 1
        assert router.is_page_expired(page) is True

    def test_exact_expiry(self, make_router, clock) -> None:
        router = make_router()
        page = HomePage()
        router.pages.meta.get(page).expires_at = clock.now
        assert router.is_page_expired(page) is True

    def test_future_expiry(self, make_router, clock) -> None:
        router = make_router()
        page = HomePage()
        router.pages.meta.get(page).expires_at = clock.now + 1
        assert router.is_page_expired(page) is False


class TestCreation:
    def test_eager_creation(self, make_router, host) -> None:
        router = make_router()
        router.route("home", HomePage)
        _, entry = router.registry.page_entry("home")
        assert entry.kind is HandlerKind.INSTANCE
        assert host.is_attached(entry.target)

    def test_created_pages_get_widget_references(self, make_router, host) -> None:
        router = make_router()
        router.route("home", HomePage)
        page = router.registry.page_entry("home")[1].target
        assert set(page.widgets) == {"menu", "header"}

    def test_lazy_creation(self, make_router, host) -> None:
        router = make_router(lazy_create=True)
        router.route("home", HomePage)
        _, entry = router.registry.page_entry("home")
        assert entry.kind is HandlerKind.CONSTRUCTOR
        assert host.actions("create") == []

    @pytest.mark.asyncio
    async def test_lazy_page_created_on_load(self, make_router, host) -> None:
        router = make_router(lazy_create=True)
        router.route("home", HomePage)
        page = await router.pages.load("home", "home")
        assert isinstance(page, HomePage)
        assert router.registry.page_entry("home")[1].target is page
        assert host.is_attached(page)
        assert page.events == ["url_params", "mounted"]

    @pytest.mark.asyncio
    async def test_async_loader(self, make_router, host) -> None:
        async def load_detail() -> type:
            return DetailPage

        router = make_router()
        router.route("detail/:id", AsyncLoader(load_detail))
        page = await router.pages.load("detail/:id", "detail/3")
        assert isinstance(page, DetailPage)
        assert page.params == {"id": "3"}
        _, entry = router.registry.page_entry("detail/:id")
        assert entry.kind is HandlerKind.INSTANCE

    @pytest.mark.asyncio
    async def test_async_loader_module_default(self, make_router) -> None:
        async def load_module() -> Any:
            return types.SimpleNamespace(default=DetailPage)

        router = make_router()
        router.route("detail", AsyncLoader(load_module))
        page = await router.pages.load("detail", "detail")
        assert isinstance(page, DetailPage)

    @pytest.mark.asyncio
    async def test_load_without_page(self, make_router) -> None:
        router = make_router()
        router.route("hook", lambda router, params: None)
        with pytest.raises(RouteNotFound):
            await router.pages.load("hook", "hook")


class TestProvide:
    @pytest.mark.asyncio
    async def test_first_load_with_provider(self, make_router, clock) -> None:
        fetched: list[dict[str, Any]] = []

        async def fetch(page: Any, params: dict[str, Any]) -> None:
            fetched.append(params)

        router = make_router()
        router.route("detail/:id", DetailPage)
        router.before("detail/:id", fetch, 30)
        page = await router.pages.load("detail/:id", "detail/5")
        assert fetched == [{"id": "5"}]
        assert router.pages.meta.get(page).expires_at == clock.now + 30_000
        assert page.events == ["url_params", "data_provided", "mounted"]

    @pytest.mark.asyncio
    async def test_same_hash_not_refetched_until_expired(self, make_router, clock) -> None:
        calls: list[str] = []
        router = make_router()
        router.route("home", HomePage)
        router.route("other", DetailPage)
        router.before("home", lambda page, params: calls.append("fetch"), 10)

        await router.pages.load("home", "home")
        await router.pages.load("other", "other")
        await router.pages.load("home", "home")
        assert calls == ["fetch"]

        clock.advance(10_000)
        await router.pages.load("other", "other")
        await router.pages.load("home", "home")
        assert calls == ["fetch", "fetch"]

    @pytest.mark.asyncio
    async def test_new_hash_refetches(self, make_router) -> None:
        calls: list[dict[str, Any]] = []
        router = make_router()
        router.route("detail/:id", DetailPage)
        router.route("home", HomePage)
        router.before("detail/:id", lambda page, params: calls.append(params), 60)

        await router.pages.load("detail/:id", "detail/1")
        await router.pages.load("home", "home")
        await router.pages.load("detail/:id", "detail/2")
        assert calls == [{"id": "1"}, {"id": "2"}]

    @pytest.mark.asyncio
    async def test_same_route_reuse_skips_transition(self, make_router, host) -> None:
        router = make_router()
        router.route("detail/:id", DetailPage)
        router.before("detail/:id", lambda page, params: None, 60)

        page = await router.pages.load("detail/:id", "detail/1")
        shows = len(host.actions("show"))
        again = await router.pages.load("detail/:id", "detail/2")
        assert again is page
        assert len(host.actions("show")) == shows
        assert page.params == {"id": "2"}
        assert page.events[-2:] == ["data_provided", "changed"]

    @pytest.mark.asyncio
    async def test_same_route_reuse_without_refresh(self, make_router) -> None:
        router = make_router()
        router.route("detail/:id", DetailPage)
        page = await router.pages.load("detail/:id", "detail/1")
        await router.pages.load("detail/:id", "detail/2")
        assert page.events == ["url_params", "mounted", "url_params", "changed"]
        assert page.params == {"id": "2"}

    @pytest.mark.asyncio
    async def test_register_exposed_as_persist(self, make_router) -> None:
        router = make_router()
        router.route("detail/:id", DetailPage)
        router.register.reset({"from": "home"})
        page = await router.pages.load("detail/:id", "detail/9")
        assert page.params == {"id": "9", "from": "home"}
        assert page.persist == {"from": "home"}


class TestCleanup:
    @pytest.mark.asyncio
    async def test_pages_kept_by_default(self, make_router, host) -> None:
        router = make_router()
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        home = await router.pages.load("home", "home")
        await router.pages.load("detail", "detail")
        assert host.is_attached(home)
        assert not host.visible(home)

    @pytest.mark.asyncio
    async def test_lazy_destroy_restores_constructor(self, make_router, host) -> None:
        router = make_router(lazy_destroy=True, gc_on_unload=True)
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        home = await router.pages.load("home", "home")
        await router.pages.load("detail", "detail")

        assert not host.is_attached(home)
        _, entry = router.registry.page_entry("home")
        assert entry.kind is HandlerKind.CONSTRUCTOR
        assert entry.target is HomePage
        assert home not in router.pages.meta
        assert host.actions("gc") == [None]

        again = await router.pages.load("home", "home")
        assert again is not home
        assert isinstance(again, HomePage)

    @pytest.mark.asyncio
    async def test_keep_alive_flag(self, make_router, host) -> None:
        router = make_router(lazy_destroy=True)
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        home = await router.pages.load("home", "home")
        router.register.reset({"keepAlive": True})
        await router.pages.load("detail", "detail")
        assert host.is_attached(home)

    @pytest.mark.asyncio
    async def test_destroy_on_history_back(self, make_router, host) -> None:
        router = make_router(destroy_on_history_back=True)
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        await router.pages.load("home", "home")
        detail = await router.pages.load("detail", "detail")

        router.register.reset({"backtrack": True})
        await router.pages.load("home", "home")
        assert not host.is_attached(detail)

    @pytest.mark.asyncio
    async def test_history_back_without_destroy_policy(self, make_router, host) -> None:
        router = make_router()
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        await router.pages.load("home", "home")
        detail = await router.pages.load("detail", "detail")
        router.register.reset({"@router:backtrack": True})
        await router.pages.load("home", "home")
        assert host.is_attached(detail)

    @pytest.mark.asyncio
    async def test_destroy_after_transition(self, make_router, host) -> None:
        router = make_router(lazy_destroy=True)
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        home = await router.pages.load("home", "home")
        detail = await router.pages.load("detail", "detail")
        show = host.log.index(("show", detail))
        remove = host.log.index(("remove", home))
        assert show < remove

    @pytest.mark.asyncio
    async def test_on_trigger_does_not_hide_destroyed_page(self, make_router, host) -> None:
        router = make_router(lazy_destroy=True)
        router.route("home", HomePage)
        router.route("detail", DetailPage)
        router.on("detail", lambda page, params: None)
        home = await router.pages.load("home", "home")
        detail = await router.pages.load("detail", "detail")

        assert not host.is_attached(home)
        assert host.visible(detail)
        assert ("hide", home) not in host.log[host.log.index(("remove", home)) :]


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_route_loaded(self, make_router, host, clock) -> None:
        failure = RuntimeError("offline")

        async def fetch(page: Any, params: Any) -> None:
            raise failure

        router = make_router()
        router.route("detail/:id", DetailPage)
        router.before("detail/:id", fetch, 60)
        router.route("!", ErrorPage)

        page = await router.pages.load("detail/:id", "detail/1")
        error_page = router.pages.active_page
        assert isinstance(error_page, ErrorPage)
        assert isinstance(error_page.error, DataProviderFailure)
        assert error_page.error.page is page
        assert error_page.error.error is failure
        assert router.pages.meta.get(page).expires_at == clock.now
        assert router.is_page_expired(page)
        assert host.visible(error_page)

    @pytest.mark.asyncio
    async def test_no_error_route_logs(self, make_router, caplog: pytest.LogCaptureFixture) -> None:
        def fetch(page: Any, params: Any) -> None:
            raise RuntimeError("offline")

        router = make_router()
        router.route("home", HomePage)
        router.on("home", fetch)
        page = await router.pages.load("home", "home")
        assert router.pages.active_page is page
        assert "Data provider failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unsupported_trigger_routed_to_error_page(self, make_router) -> None:
        router = make_router()
        router.route("home", HomePage)
        router.on("home", lambda page, params: None, 0, "during")
        router.route("!", ErrorPage)
        await router.pages.load("home", "home")
        error_page = router.pages.active_page
        assert isinstance(error_page, ErrorPage)
        assert "during is not supported" in str(error_page.error.error)

    @pytest.mark.asyncio
    async def test_on_trigger_failure_reverts_loading(self, make_router, host) -> None:
        def fetch(page: Any, params: Any) -> None:
            raise RuntimeError("offline")

        router = make_router()
        router.route("home", HomePage)
        router.on("home", fetch)
        router.route("!", ErrorPage)
        await router.pages.load("home", "home")
        assert "Loading" in [subject for name, subject in host.log if name == "state"]
        assert host.state == ""
