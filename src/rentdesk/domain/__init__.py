"""Domain layer - models, views and envelope validation."""

from rentdesk.domain.models import (
    BillStatus,
    BillPriority,
    ExpenseCategory,
    NotificationType,
    NotificationPriority,
    ActionType,
    UiEventType,
    CacheEntry,
    Notification,
    NotificationAction,
    UiEvent,
)

__all__ = [
    "BillStatus",
    "BillPriority",
    "ExpenseCategory",
    "NotificationType",
    "NotificationPriority",
    "ActionType",
    "UiEventType",
    "CacheEntry",
    "Notification",
    "NotificationAction",
    "UiEvent",
]
