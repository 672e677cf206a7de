"""Service layer - data access, enrichment and notifications."""

from rentdesk.services.data_service import DataService
from rentdesk.services.notification_service import NotificationService

__all__ = [
    "DataService",
    "NotificationService",
]
