"""View models for service outputs."""

from rentdesk.domain.views.dashboard import (
    CollectionSummary,
    BillsSummary,
    DashboardSummary,
    SystemStatus,
    NotificationStats,
)

__all__ = [
    "CollectionSummary",
    "BillsSummary",
    "DashboardSummary",
    "SystemStatus",
    "NotificationStats",
]
