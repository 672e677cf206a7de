"""Data service: cached, enriched access to dashboard collections."""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from rentdesk.core.formatting import get_current_french_datetime, get_current_month, get_due_date
from rentdesk.core.scheduler import PeriodicTask
from rentdesk.core.timezone import now_paris
from rentdesk.domain.envelope import unwrap
from rentdesk.domain.models import BillStatus, CacheEntry
from rentdesk.domain.views import BillsSummary, CollectionSummary, DashboardSummary, SystemStatus
from rentdesk.providers.api_client import PropertyApiClient
from rentdesk.services import enrichment

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_REFRESH_INTERVAL_SECONDS = 120.0
DEFAULT_BACKEND_BASE_URL = "http://localhost:4002"


class DataService:
    """
    Service for fetching properties, tenants, bills, bill stats and expenses.

    Wraps the API client with a time-boxed cache (checked lazily on read),
    French presentation enrichment and an optional auto-refresh loop.
    """

    def __init__(
        self,
        api_client: PropertyApiClient,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        backend_base_url: str = DEFAULT_BACKEND_BASE_URL,
        clock: Callable[[], datetime] = now_paris,
        auto_refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        timezone_name: str = "Europe/Paris",
    ):
        self._api = api_client
        self._cache_ttl_ms = int(cache_ttl_seconds * 1000)
        self._backend_base_url = backend_base_url
        self._clock = clock
        self._timezone_name = timezone_name
        self._cache: dict[str, CacheEntry] = {}
        self._is_refreshing = False
        self._refresh_task = PeriodicTask(
            self.refresh_all_data,
            auto_refresh_interval_seconds,
            name="data-auto-refresh",
        )

    # Lifecycle

    def init(self, auto_refresh: bool = True) -> None:
        """Start background refresh (requires a running event loop)."""
        if auto_refresh:
            self.start_auto_refresh()

    def dispose(self) -> None:
        self.stop_auto_refresh()
        self.clear_cache()

    async def drain(self) -> None:
        """Wait for auto-refresh ticks already started."""
        await self._refresh_task.wait_idle()

    # Cache

    @property
    def is_refreshing(self) -> bool:
        return self._is_refreshing

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        """Drop every cached entry; the next fetches hit the network."""
        self._cache.clear()

    def _now_ms(self) -> int:
        return int(self._clock().timestamp() * 1000)

    def _get_cached(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is not None and entry.is_valid(self._now_ms(), self._cache_ttl_ms):
            return entry.payload
        return None

    def _set_cached(self, key: str, payload: Any) -> None:
        self._cache[key] = CacheEntry(key=key, payload=payload, fetched_at_ms=self._now_ms())

    async def _cached_fetch(
        self,
        key: str,
        label: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        cached = self._get_cached(key)
        if cached is not None:
            return cached

        logger.info("Fetching %s", label)
        try:
            payload = await loader()
        except Exception:
            logger.exception("Error fetching %s", label)
            raise
        self._set_cached(key, payload)
        if isinstance(payload, list):
            logger.info("Fetched %d %s", len(payload), label)
        return payload

    # Resource fetches

    async def fetch_properties(self) -> list[dict[str, Any]]:
        """Properties with their photos; one photo request per property."""

        async def load() -> list[dict[str, Any]]:
            records = unwrap(await self._api.list_properties(), "properties")
            photo_sets = await asyncio.gather(*(self._fetch_photos(r.get("id")) for r in records))
            return [enrichment.enrich_property(r, photos) for r, photos in zip(records, photo_sets)]

        return await self._cached_fetch("properties", "properties", load)

    async def _fetch_photos(self, property_id: Any) -> list[dict[str, Any]]:
        """Photos of one property; failure degrades to an empty list."""
        try:
            body = await self._api.get_property_photos(property_id)
        except Exception as exc:
            logger.warning("Could not fetch photos for property %s: %s", property_id, exc)
            return []
        if not (isinstance(body, dict) and body.get("success")):
            return []
        photos = (body.get("data") or {}).get("photos")
        if not isinstance(photos, list):
            return []
        return [enrichment.enrich_photo(p, self._backend_base_url) for p in photos]

    async def fetch_tenants(self) -> list[dict[str, Any]]:
        async def load() -> list[dict[str, Any]]:
            records = unwrap(await self._api.list_tenants(), "tenants")
            return [enrichment.enrich_tenant(r) for r in records]

        return await self._cached_fetch("tenants", "tenants", load)

    async def fetch_bills(self, filters: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        """Bills matching ``filters``; each filter combination is cached separately."""
        filters = dict(filters or {})
        cache_key = f"bills_{json.dumps(filters, sort_keys=True, default=str)}"

        async def load() -> list[dict[str, Any]]:
            records = unwrap(await self._api.list_bills(filters), "bills")
            now = self._clock()
            return [enrichment.enrich_bill(r, now) for r in records]

        return await self._cached_fetch(cache_key, "bills", load)

    async def fetch_bills_stats(self) -> dict[str, Any]:
        async def load() -> dict[str, Any]:
            stats = unwrap(await self._api.get_bills_stats())
            return enrichment.enrich_bills_stats(stats, self._clock())

        return await self._cached_fetch("bills_stats", "bills statistics", load)

    async def fetch_expenses(self) -> list[dict[str, Any]]:
        async def load() -> list[dict[str, Any]]:
            records = unwrap(await self._api.list_expenses(), "expenses")
            return [enrichment.enrich_expense(r) for r in records]

        return await self._cached_fetch("expenses", "expenses", load)

    # Aggregates

    async def get_dashboard_summary(self) -> DashboardSummary:
        """
        Fetch every resource concurrently and aggregate.

        All-or-nothing: any failing fetch fails the whole summary.
        """
        logger.info("Fetching dashboard summary")
        properties, tenants, bills, stats, expenses = await asyncio.gather(
            self.fetch_properties(),
            self.fetch_tenants(),
            self.fetch_bills({"limit": 10}),
            self.fetch_bills_stats(),
            self.fetch_expenses(),
        )

        now = self._clock()
        return DashboardSummary(
            properties=CollectionSummary(
                total=len(properties),
                active=sum(1 for p in properties if p.get("is_active")),
                data=properties,
            ),
            tenants=CollectionSummary(
                total=len(tenants),
                active=sum(1 for t in tenants if t.get("is_active")),
                data=tenants,
            ),
            bills=BillsSummary(
                total=len(bills),
                pending=sum(1 for b in bills if b.get("status") == BillStatus.PENDING.value),
                overdue=sum(1 for b in bills if b.get("is_overdue")),
                paid=sum(1 for b in bills if b.get("status") == BillStatus.PAID.value),
                data=bills,
            ),
            stats=stats,
            expenses=CollectionSummary(total=len(expenses), data=expenses),
            last_updated=get_current_french_datetime(now),
            last_updated_timestamp=now.isoformat(),
        )

    async def refresh_all_data(self) -> None:
        """Refetch everything; skipped while a previous refresh is still running."""
        if self._is_refreshing:
            logger.debug("Refresh already in progress, skipping tick")
            return

        self._is_refreshing = True
        logger.info("Refreshing all data")
        try:
            await asyncio.gather(
                self.fetch_properties(),
                self.fetch_tenants(),
                self.fetch_bills(),
                self.fetch_bills_stats(),
                self.fetch_expenses(),
            )
            logger.info("All data refreshed successfully")
        except Exception:
            # Unattended timer path: nobody to report to
            logger.exception("Error refreshing data")
        finally:
            self._is_refreshing = False

    def start_auto_refresh(self, interval_seconds: Optional[float] = None) -> None:
        """Start (or restart) the refresh timer; never more than one runs."""
        self._refresh_task.start(interval_seconds)
        logger.info("Auto-refresh started with interval: %s seconds", self._refresh_task.interval_seconds)

    def stop_auto_refresh(self) -> None:
        if self._refresh_task.is_running:
            self._refresh_task.stop()
            logger.info("Auto-refresh stopped")

    @property
    def is_auto_refresh_active(self) -> bool:
        return self._refresh_task.is_running

    # Helpers

    def get_new_bill_defaults(self) -> dict[str, Any]:
        """Defaults for the new-bill form: this month, due on its last day."""
        now = self._clock()
        return {
            "tenant_id": 0,
            "property_id": 0,
            "amount": 0,
            "month": get_current_month(now),
            "due_date": get_due_date(now),
            "description": "Paiement de loyer mensuel",
            "status": BillStatus.PENDING.value,
        }

    def normalize_photo_url(self, photo_url: Optional[str]) -> Optional[str]:
        return enrichment.normalize_photo_url(photo_url, self._backend_base_url)

    def get_backend_base_url(self) -> str:
        return self._backend_base_url

    # Labels and derivations exposed on the service
    format_address = staticmethod(enrichment.format_address)
    get_bill_status_french = staticmethod(enrichment.get_bill_status_french)
    get_bill_priority = staticmethod(enrichment.get_bill_priority)
    get_expense_category_french = staticmethod(enrichment.get_expense_category_french)

    def get_system_status(self) -> SystemStatus:
        return SystemStatus(
            cache_size=self.cache_size,
            is_auto_refresh_active=self.is_auto_refresh_active,
            is_refreshing=self._is_refreshing,
            current_time=get_current_french_datetime(self._clock()),
            timezone=self._timezone_name,
            backend_base_url=self._backend_base_url,
        )
