"""Pydantic schemas for notification endpoints."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from rentdesk.domain.models.enums import NotificationType, NotificationPriority, UiEventType


class NotificationActionSchema(BaseModel):
    """What a click on the notification opens."""

    model_config = ConfigDict(from_attributes=True)

    type: str
    label: str
    data: dict[str, Any] = Field(default_factory=dict)


class NotificationResponse(BaseModel):
    """Response schema for a single notification."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    detail: str
    timestamp: datetime
    timestamp_fr: str
    action: Optional[NotificationActionSchema] = None
    read: bool
    icon: str
    color: str


class NotificationListResponse(BaseModel):
    """Response schema for the notification feed."""

    notifications: list[NotificationResponse]
    count: int
    unread: int


class NotificationStatsResponse(BaseModel):
    """Response schema for notification counts."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    unread: int
    by_type: dict[str, int]
    by_priority: dict[str, int]
    last_updated: str


class NotificationCreateRequest(BaseModel):
    """Request schema for an application-raised notification."""

    title: str = Field(..., min_length=1, description="Notification title")
    message: str = Field(default="", description="Main line of text")
    type: NotificationType = NotificationType.CUSTOM
    priority: NotificationPriority = NotificationPriority.MEDIUM
    detail: str = ""
    action: Optional[NotificationActionSchema] = None
    icon: str = "bell"
    color: str = "blue"


class UiEventResponse(BaseModel):
    """Navigation request produced by a notification action."""

    model_config = ConfigDict(from_attributes=True)

    type: UiEventType
    detail: dict[str, Any]


class ActionResultResponse(BaseModel):
    """Result of executing a notification's action."""

    notification: NotificationResponse
    event: Optional[UiEventResponse] = None
