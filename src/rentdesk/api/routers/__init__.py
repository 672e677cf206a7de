"""API routers package."""

from rentdesk.api.routers.dashboard import router as dashboard_router
from rentdesk.api.routers.notifications import router as notifications_router

__all__ = [
    "dashboard_router",
    "notifications_router",
]
