"""View models for dashboard and notification outputs."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CollectionSummary:
    """Totals for one enriched collection."""

    total: int
    data: list[dict[str, Any]] = field(default_factory=list)
    active: Optional[int] = None


@dataclass
class BillsSummary:
    """Bill counts by state."""

    total: int
    pending: int
    overdue: int
    paid: int
    data: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class DashboardSummary:
    """Aggregate of every dashboard resource, fetched in one fan-out."""

    properties: CollectionSummary
    tenants: CollectionSummary
    bills: BillsSummary
    stats: dict[str, Any]
    expenses: CollectionSummary
    last_updated: str
    last_updated_timestamp: str


@dataclass
class SystemStatus:
    """Snapshot of the data cache state."""

    cache_size: int
    is_auto_refresh_active: bool
    is_refreshing: bool
    current_time: str
    timezone: str
    backend_base_url: str


@dataclass
class NotificationStats:
    """Counts over the current notification list."""

    total: int
    unread: int
    by_type: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)
    last_updated: str = ""
