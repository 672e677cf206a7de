"""Notification feed endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from rentdesk.api.deps import get_notification_service
from rentdesk.api.schemas import (
    NotificationResponse,
    NotificationListResponse,
    NotificationStatsResponse,
    NotificationCreateRequest,
    UiEventResponse,
    ActionResultResponse,
)
from rentdesk.core.exceptions import NotFoundError
from rentdesk.domain.models import Notification
from rentdesk.domain.models.enums import NotificationType, NotificationPriority
from rentdesk.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_list_response(notifications: list[Notification]) -> NotificationListResponse:
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        count=len(notifications),
        unread=sum(1 for n in notifications if not n.read),
    )


def _require(service: NotificationService, notification_id: str) -> Notification:
    notification = service.get_notification(notification_id)
    if notification is None:
        raise NotFoundError("Notification", notification_id)
    return notification


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    type: Optional[NotificationType] = Query(None, description="Only this notification type"),
    priority: Optional[NotificationPriority] = Query(None, description="Only this priority"),
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Current feed, as of the last poll."""
    items = notifications.notifications
    if type is not None:
        items = [n for n in items if n.type == type]
    if priority is not None:
        items = [n for n in items if n.priority == priority]
    return _to_list_response(items)


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    data: NotificationCreateRequest,
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    """Raise an application notification at the top of the feed."""
    created = notifications.create_notification(**data.model_dump(exclude_none=True))
    return NotificationResponse.model_validate(created)


@router.post("/refresh", response_model=NotificationListResponse)
async def refresh_notifications(
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Run a poll cycle now."""
    return _to_list_response(await notifications.fetch_notifications())


@router.get("/stats", response_model=NotificationStatsResponse)
async def get_stats(
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationStatsResponse:
    """Counts by type and priority."""
    return NotificationStatsResponse.model_validate(notifications.get_stats())


@router.post("/read-all", response_model=NotificationListResponse)
async def mark_all_read(
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """Mark the whole feed read."""
    notifications.mark_all_as_read()
    return _to_list_response(notifications.notifications)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    notifications: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    """Mark one notification read."""
    _require(notifications, notification_id)
    notifications.mark_as_read(notification_id)
    return NotificationResponse.model_validate(notifications.get_notification(notification_id))


@router.post("/{notification_id}/action", response_model=ActionResultResponse)
async def execute_action(
    notification_id: str,
    notifications: NotificationService = Depends(get_notification_service),
) -> ActionResultResponse:
    """Execute the notification's action and return the UI event it produced."""
    event = notifications.execute_action(_require(notifications, notification_id))
    return ActionResultResponse(
        notification=NotificationResponse.model_validate(notifications.get_notification(notification_id)),
        event=UiEventResponse.model_validate(event) if event is not None else None,
    )


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: str,
    notifications: NotificationService = Depends(get_notification_service),
) -> None:
    """Dismiss a notification until the next poll rebuilds it."""
    _require(notifications, notification_id)
    notifications.remove_notification(notification_id)
