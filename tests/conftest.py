"""
Pytest configuration and fixtures for dashboard core tests.

This module provides:
- Time helpers for Europe/Paris and a controllable clock
- Stub backend and token store fixtures
- Bill/tenant record factories
- Service fixtures
- FastAPI test client over a stub-backed application context
"""

from datetime import datetime, timedelta
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from rentdesk.main import app
from rentdesk.app_context import AppContext, set_app_context
from rentdesk.config.settings import Settings, reset_settings
from rentdesk.core.events import EventEmitter
from rentdesk.core.timezone import PARIS_TZ
from rentdesk.domain.models import UiEvent
from rentdesk.providers import MemoryTokenStore, StubPropertyApiClient
from rentdesk.services import DataService, NotificationService


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def paris_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in Europe/Paris timezone."""
    return PARIS_TZ.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return paris_datetime(2024, 1, 10, 10, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


# =============================================================================
# RECORD FACTORIES
# =============================================================================


def make_bill(
    bill_id: int,
    due_date: str,
    amount: Any = 100,
    status: str = "PENDING",
    tenant: Optional[str] = "Alice Dupont",
    **extra: Any,
) -> dict[str, Any]:
    """Backend bill record."""
    bill = {
        "id": bill_id,
        "amount": amount,
        "status": status,
        "due_date": due_date,
        "created_at": "2023-12-01T09:00:00",
    }
    if tenant is not None:
        bill["tenant"] = {"name": tenant}
    bill.update(extra)
    return bill


def make_tenant(tenant_id: int, name: str, **extra: Any) -> dict[str, Any]:
    """Backend tenant record."""
    tenant = {"id": tenant_id, "name": name, "status": "ACTIVE"}
    tenant.update(extra)
    return tenant


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================


@pytest.fixture
def stub_api(clock) -> StubPropertyApiClient:
    """Stub backend seeded relative to the fixed clock."""
    return StubPropertyApiClient(seed=42, clock=clock)


@pytest.fixture
def token_store() -> MemoryTokenStore:
    """Logged-in session."""
    return MemoryTokenStore(token="test-token")


@pytest.fixture
def ui_events() -> EventEmitter[UiEvent]:
    return EventEmitter("ui-events")


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def data_service(stub_api, clock) -> DataService:
    """Provide test DataService over the stub backend."""
    return DataService(
        api_client=stub_api,
        cache_ttl_seconds=300,
        backend_base_url="http://localhost:4002",
        clock=clock,
    )


@pytest.fixture
def notification_service(stub_api, token_store, clock, ui_events) -> NotificationService:
    """Provide test NotificationService over the stub backend."""
    return NotificationService(
        api_client=stub_api,
        token_store=token_store,
        clock=clock,
        ui_events=ui_events,
    )


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def app_context(stub_api, token_store, clock, tmp_path) -> AppContext:
    """Application context with background timers disabled."""
    reset_settings()
    settings = Settings(
        data_dir=tmp_path,
        use_stub_api=True,
        auto_refresh_enabled=False,
        notification_polling_enabled=False,
    )
    return AppContext(
        settings=settings,
        api_client=stub_api,
        token_store=token_store,
        clock=clock,
    )


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client bound to the test context."""
    set_app_context(app_context)
    with TestClient(app) as c:
        yield c
    set_app_context(None)
