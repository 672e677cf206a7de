"""Dependency injection for FastAPI."""

from fastapi import Depends

from rentdesk.app_context import AppContext, get_app_context
from rentdesk.services import DataService, NotificationService


async def get_context() -> AppContext:
    """Provide the application context."""
    return get_app_context()


async def get_data_service(context: AppContext = Depends(get_context)) -> DataService:
    """Provide DataService instance."""
    return context.data


async def get_notification_service(context: AppContext = Depends(get_context)) -> NotificationService:
    """Provide NotificationService instance."""
    return context.notifications
