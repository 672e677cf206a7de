"""
Integration tests over the HTTP client.

The stub backend is served through httpx.MockTransport so the services run
against the real client: headers, envelopes and status mapping included.

Tests cover:
- Dashboard summary over HTTP
- Notification feed over HTTP
- Session expiry (401) quiesces notification polling
- Teardown waits for poll cycles still talking to the backend
"""

import asyncio
import re

import httpx
import pytest

from rentdesk.app_context import AppContext
from rentdesk.config.settings import Settings
from rentdesk.core.exceptions import ApiError
from rentdesk.providers import HttpPropertyApiClient, MemoryTokenStore, StubPropertyApiClient
from rentdesk.services import DataService, NotificationService

from tests.conftest import FakeClock

PHOTOS_PATH = re.compile(r"^/api/properties/(\d+)/photos$")


class StubBackend:
    """Routes HTTP requests to a StubPropertyApiClient."""

    def __init__(self, stub: StubPropertyApiClient):
        self.stub = stub
        self.requests: list[httpx.Request] = []
        self.expired = False
        self.delay = 0.0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.expired:
            return httpx.Response(401, json={"success": False, "error": "Token expired"})

        path = request.url.path
        match = PHOTOS_PATH.match(path)
        if match:
            body = await self.stub.get_property_photos(int(match.group(1)))
        elif path == "/api/properties":
            body = await self.stub.list_properties()
        elif path == "/api/tenants":
            body = await self.stub.list_tenants()
        elif path == "/api/bills/stats":
            body = await self.stub.get_bills_stats()
        elif path == "/api/bills":
            body = await self.stub.list_bills(dict(request.url.params))
        elif path == "/api/expenses":
            body = await self.stub.list_expenses()
        else:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        return httpx.Response(200, json=body)


@pytest.fixture
def backend(stub_api) -> StubBackend:
    return StubBackend(stub_api)


@pytest.fixture
def http_client(backend, token_store) -> HttpPropertyApiClient:
    return HttpPropertyApiClient(
        base_url="http://localhost:4002/api",
        token_store=token_store,
        transport=httpx.MockTransport(backend),
    )


class TestDashboardOverHttp:
    """Tests for DataService over the HTTP client."""

    @pytest.mark.asyncio
    async def test_summary(self, http_client: HttpPropertyApiClient, backend: StubBackend, clock: FakeClock):
        service = DataService(api_client=http_client, clock=clock)

        summary = await service.get_dashboard_summary()
        await http_client.aclose()

        assert summary.properties.total == 3
        assert summary.bills.overdue == 1
        assert summary.properties.data[0]["photo_count"] == 2
        assert all(r.headers["Authorization"] == "Bearer test-token" for r in backend.requests)
        assert backend.stub.bill_filters == [{"limit": "10"}]

    @pytest.mark.asyncio
    async def test_expired_session_surfaces_as_api_error(
        self,
        http_client: HttpPropertyApiClient,
        backend: StubBackend,
        token_store: MemoryTokenStore,
        clock: FakeClock,
    ):
        backend.expired = True
        service = DataService(api_client=http_client, clock=clock)

        with pytest.raises(ApiError) as exc_info:
            await service.fetch_tenants()
        await http_client.aclose()

        assert exc_info.value.status_code == 401
        assert token_store.get_token() is None


class TestNotificationsOverHttp:
    """Tests for NotificationService over the HTTP client."""

    @pytest.mark.asyncio
    async def test_feed(self, http_client: HttpPropertyApiClient, backend: StubBackend, token_store, clock):
        service = NotificationService(api_client=http_client, token_store=token_store, clock=clock)

        notifications = await service.fetch_notifications()
        await http_client.aclose()

        assert [n.id for n in notifications] == ["overdue-1", "tenant-2", "system-backup", "payment-2"]
        bills_request = next(r for r in backend.requests if r.url.path == "/api/bills")
        assert dict(bills_request.url.params) == {"limit": "10", "sort": "created_at", "order": "DESC"}

    @pytest.mark.asyncio
    async def test_session_expiry_quiesces_polling(
        self,
        http_client: HttpPropertyApiClient,
        backend: StubBackend,
        token_store: MemoryTokenStore,
        clock: FakeClock,
    ):
        """
        GIVEN a populated feed
        WHEN the backend starts answering 401
        THEN the token is cleared and the next cycle empties the feed without requests
        """
        service = NotificationService(api_client=http_client, token_store=token_store, clock=clock)
        await service.fetch_notifications()

        backend.expired = True
        degraded = await service.fetch_notifications()
        assert [n.id for n in degraded] == ["system-backup"]
        assert token_store.get_token() is None

        requests_before = len(backend.requests)
        quiet = await service.fetch_notifications()
        await http_client.aclose()

        assert quiet == []
        assert len(backend.requests) == requests_before


class TestTeardownOverHttp:
    """Tests for AppContext.dispose() with requests in flight."""

    @pytest.mark.asyncio
    async def test_dispose_waits_for_running_poll_cycle(
        self,
        http_client: HttpPropertyApiClient,
        backend: StubBackend,
        token_store: MemoryTokenStore,
        clock: FakeClock,
        tmp_path,
    ):
        """
        GIVEN polling started and the first cycle waiting on a slow backend
        WHEN the context is disposed
        THEN the cycle completes on the open client and nothing runs afterwards
        """
        backend.delay = 0.05
        settings = Settings(
            data_dir=tmp_path,
            auto_refresh_enabled=False,
            notification_poll_interval_seconds=60,
        )
        context = AppContext(settings=settings, api_client=http_client, token_store=token_store, clock=clock)
        feeds: list[list[str]] = []

        await context.init()
        context.notifications.add_listener(lambda feed: feeds.append([n.id for n in feed]))
        await asyncio.sleep(0)
        await context.dispose()

        expected = ["overdue-1", "tenant-2", "system-backup", "payment-2"]
        assert feeds == [expected]
        assert [n.id for n in context.notifications.notifications] == expected

        requests_after_dispose = len(backend.requests)
        await asyncio.sleep(0.1)
        assert len(backend.requests) == requests_after_dispose
