"""Pydantic schemas for API request/response."""

from rentdesk.api.schemas.dashboard import (
    CollectionSummaryResponse,
    BillsSummaryResponse,
    DashboardSummaryResponse,
    SystemStatusResponse,
    BillDefaultsResponse,
)
from rentdesk.api.schemas.notification import (
    NotificationActionSchema,
    NotificationResponse,
    NotificationListResponse,
    NotificationStatsResponse,
    NotificationCreateRequest,
    UiEventResponse,
    ActionResultResponse,
)

__all__ = [
    "CollectionSummaryResponse",
    "BillsSummaryResponse",
    "DashboardSummaryResponse",
    "SystemStatusResponse",
    "BillDefaultsResponse",
    "NotificationActionSchema",
    "NotificationResponse",
    "NotificationListResponse",
    "NotificationStatsResponse",
    "NotificationCreateRequest",
    "UiEventResponse",
    "ActionResultResponse",
]
