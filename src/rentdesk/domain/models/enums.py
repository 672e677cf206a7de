"""Enumerations for domain models."""

from enum import Enum


class BillStatus(str, Enum):
    """Lifecycle states of a rent bill."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    RECEIPT_SENT = "RECEIPT_SENT"
    CANCELLED = "CANCELLED"


class BillPriority(str, Enum):
    """Urgency derived from status and due date."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExpenseCategory(str, Enum):
    MAINTENANCE = "MAINTENANCE"
    REPAIRS = "REPAIRS"
    UTILITIES = "UTILITIES"
    INSURANCE = "INSURANCE"
    TAXES = "TAXES"
    ADMINISTRATIVE = "ADMINISTRATIVE"
    OTHER = "OTHER"


class NotificationType(str, Enum):
    OVERDUE = "overdue"
    NEW_TENANT = "new_tenant"
    PAYMENT = "payment"
    MAINTENANCE = "maintenance"
    SYSTEM = "system"
    CUSTOM = "custom"


class NotificationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class ActionType(str, Enum):
    """What clicking a notification should open."""

    VIEW_BILL = "view_bill"
    VIEW_TENANT = "view_tenant"
    VIEW_PROPERTY = "view_property"
    VIEW_RECEIPT = "view_receipt"
    VIEW_BACKUPS = "view_backups"


class UiEventType(str, Enum):
    """Events handed to the dashboard for in-app navigation."""

    NAVIGATE_TO_SECTION = "navigate-to-section"
    OPEN_RECEIPT = "open-receipt"
