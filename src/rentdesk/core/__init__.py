"""Core utilities and shared functionality."""

from rentdesk.core.timezone import (
    now_paris,
    to_paris,
    parse_datetime_paris,
    PARIS_TZ,
)
from rentdesk.core.exceptions import (
    AppError,
    InvalidResponseError,
    ApiError,
    ApiConnectionError,
    NotFoundError,
)
from rentdesk.core.events import EventEmitter, Subscription
from rentdesk.core.scheduler import PeriodicTask

__all__ = [
    "now_paris",
    "to_paris",
    "parse_datetime_paris",
    "PARIS_TZ",
    "AppError",
    "InvalidResponseError",
    "ApiError",
    "ApiConnectionError",
    "NotFoundError",
    "EventEmitter",
    "Subscription",
    "PeriodicTask",
]
