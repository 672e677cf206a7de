"""Notification and UI event models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from rentdesk.domain.models.enums import (
    NotificationType,
    NotificationPriority,
    UiEventType,
)


@dataclass(frozen=True)
class NotificationAction:
    """Action attached to a notification (what a click opens)."""

    type: str
    label: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Notification:
    """
    A derived, human-facing notification.

    Frozen: read state changes produce a new instance via dataclasses.replace.
    The id is derived from the source record (e.g. "overdue-12") so the same
    notification can be recognised across poll cycles.
    """

    id: str
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    timestamp: datetime
    timestamp_fr: str
    detail: str = ""
    action: Optional[NotificationAction] = None
    read: bool = False
    icon: str = "bell"
    color: str = "gray"


@dataclass(frozen=True)
class UiEvent:
    """Navigation request for the dashboard (navigate-to-section, open-receipt)."""

    type: UiEventType
    detail: dict[str, Any] = field(default_factory=dict)
