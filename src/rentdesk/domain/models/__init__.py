"""Domain models package."""

from rentdesk.domain.models.enums import (
    BillStatus,
    BillPriority,
    ExpenseCategory,
    NotificationType,
    NotificationPriority,
    ActionType,
    UiEventType,
)
from rentdesk.domain.models.cache import CacheEntry
from rentdesk.domain.models.notification import Notification, NotificationAction, UiEvent

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
