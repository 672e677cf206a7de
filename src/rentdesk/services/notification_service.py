"""
Notification service.

There is no notifications backend: every poll cycle rebuilds the feed from
bills, tenants and properties. Ids are derived from source record ids, which
is what lets read state survive a rebuild.
"""

import asyncio
import dataclasses
import itertools
import logging
import random
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

from rentdesk.core.events import EventEmitter
from rentdesk.core.formatting import (
    format_french_datetime,
    format_plain_amount,
    get_current_french_datetime,
    get_days_until_due,
)
from rentdesk.core.scheduler import PeriodicTask
from rentdesk.core.timezone import now_paris, parse_datetime_paris
from rentdesk.domain.envelope import unwrap_or_empty
from rentdesk.domain.models import (
    ActionType,
    BillStatus,
    Notification,
    NotificationAction,
    NotificationPriority,
    NotificationType,
    UiEvent,
    UiEventType,
)
from rentdesk.domain.views import NotificationStats
from rentdesk.providers.api_client import PropertyApiClient
from rentdesk.providers.token_store import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0
NEW_TENANT_WINDOW = timedelta(days=3)
RECENT_PAYMENT_WINDOW = timedelta(days=1)
BILLS_QUERY = {"limit": 10, "sort": "created_at", "order": "DESC"}

# Dashboard section ids targeted by navigate-to-section
SECTION_PAYMENTS = "payments"
SECTION_TENANTS = "tunnet"
SECTION_PROPERTIES = "properties"
SECTION_SETTINGS = "settings"

NotificationListener = Callable[[list[Notification]], None]


class NotificationService:
    """
    Polls the backend and maintains the notification feed.

    Listeners receive the full list, synchronously and in registration
    order, after every change.
    """

    def __init__(
        self,
        api_client: PropertyApiClient,
        token_store: TokenStore,
        clock: Callable[[], datetime] = now_paris,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        simulate_maintenance: bool = False,
        maintenance_probability: float = 0.2,
        rng: Optional[random.Random] = None,
        ui_events: Optional[EventEmitter[UiEvent]] = None,
    ):
        self._api = api_client
        self._token_store = token_store
        self._clock = clock
        self._simulate_maintenance = simulate_maintenance
        self._maintenance_probability = maintenance_probability
        self._rng = rng or random.Random()
        self._ui_events: EventEmitter[UiEvent] = ui_events or EventEmitter("ui-events")

        self._notifications: list[Notification] = []
        self._read_ids: set[str] = set()
        self._listeners: EventEmitter[list[Notification]] = EventEmitter("notifications")
        self._last_updated: Optional[datetime] = None
        self._custom_ids = itertools.count(1)

        self._is_polling = False
        self._poll_task = PeriodicTask(self._poll_tick, poll_interval_seconds, name="notification-polling")
        self._initial_fetch: Optional[asyncio.Task] = None
        self._inflight: Optional[asyncio.Task] = None

    # Lifecycle

    def init(self, polling: bool = True) -> None:
        if polling:
            self.start_polling()

    def dispose(self) -> None:
        self.stop_polling()
        self._listeners.clear()

    async def drain(self) -> None:
        """Wait for poll cycles already started; call after stop_polling()."""
        await self._poll_task.wait_idle()
        pending = [t for t in (self._initial_fetch, self._inflight) if t is not None and not t.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # State

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def ui_events(self) -> EventEmitter[UiEvent]:
        return self._ui_events

    @property
    def is_polling(self) -> bool:
        return self._is_polling

    def add_listener(self, callback: NotificationListener) -> Callable[[], None]:
        """Subscribe to list changes; returns the unsubscribe function."""
        return self._listeners.subscribe(callback)

    def _replace(self, notifications: list[Notification]) -> None:
        self._notifications = notifications
        self._listeners.emit(list(notifications))

    # Polling

    def start_polling(self) -> None:
        """Fetch now, then every poll interval. A second call is a no-op."""
        if self._is_polling:
            logger.info("Polling already active")
            return

        self._is_polling = True
        logger.info("Starting notification polling")
        self._poll_task.start()
        self._initial_fetch = asyncio.get_running_loop().create_task(self._poll_tick())

    def stop_polling(self) -> None:
        """Stop future ticks; a cycle already in flight still completes."""
        if self._poll_task.is_running:
            self._poll_task.stop()
            logger.info("Notification polling stopped")
        self._is_polling = False

    async def _poll_tick(self) -> None:
        try:
            await self.fetch_notifications()
        except Exception:
            logger.exception("Error in notification polling")

    async def fetch_notifications(self) -> list[Notification]:
        """
        Run one poll cycle and return the new feed.

        Without a stored token the feed is emptied and no request is made.
        Concurrent callers share the cycle already in flight.
        """
        if not self._token_store.get_token():
            logger.info("No token found, skipping notifications fetch")
            self._read_ids.clear()
            self._replace([])
            return []

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.get_running_loop().create_task(self._run_cycle())
        return await asyncio.shield(self._inflight)

    async def _run_cycle(self) -> list[Notification]:
        try:
            bills, tenants, properties = await asyncio.gather(
                self._load_source(self._api.list_bills(dict(BILLS_QUERY)), "bills"),
                self._load_source(self._api.list_tenants(), "tenants"),
                self._load_source(self._api.list_properties(), "properties"),
            )
            now = self._clock()
            notifications = self._build(bills, tenants, properties, now)
        except Exception:
            logger.exception("Error building notifications")
            return []

        self._read_ids &= {n.id for n in notifications}
        self._last_updated = now
        self._replace(notifications)
        logger.info("Fetched %d notifications", len(notifications))
        return list(notifications)

    async def _load_source(self, request: Awaitable[Any], key: str) -> list[dict[str, Any]]:
        """One source collection; a failure yields [] instead of failing the cycle."""
        try:
            body = await request
        except Exception as exc:
            logger.warning("Error fetching %s for notifications: %s", key, exc)
            return []
        return unwrap_or_empty(body, key)

    # Derivation

    def _build(
        self,
        bills: list[dict[str, Any]],
        tenants: list[dict[str, Any]],
        properties: list[dict[str, Any]],
        now: datetime,
    ) -> list[Notification]:
        notifications = [
            *self._overdue_bills(bills, now),
            *self._new_tenants(tenants, now),
            *self._recent_payments(bills, now),
            *self._maintenance(properties, now),
            self._system_backup(now),
        ]
        if self._read_ids:
            notifications = [
                dataclasses.replace(n, read=True) if n.id in self._read_ids else n for n in notifications
            ]

        # Two stable passes: priority first, newest first within a priority
        notifications.sort(key=lambda n: n.timestamp, reverse=True)
        notifications.sort(key=lambda n: n.priority.rank, reverse=True)
        return notifications

    def _overdue_bills(self, bills: list[dict[str, Any]], now: datetime) -> list[Notification]:
        result = []
        for bill in bills:
            if bill.get("status") == BillStatus.PAID.value:
                continue
            days_until_due = get_days_until_due(bill.get("due_date"), now)
            if days_until_due is None or days_until_due >= 0:
                continue

            days_overdue = -days_until_due
            amount = format_plain_amount(bill.get("amount") or bill.get("total_amount"))
            result.append(
                Notification(
                    id=f"overdue-{bill.get('id')}",
                    type=NotificationType.OVERDUE,
                    priority=NotificationPriority.HIGH,
                    title="Facture en retard",
                    message=(
                        f"Facture de €{amount} en retard de {days_overdue} "
                        f"jour{'s' if days_overdue > 1 else ''}"
                    ),
                    detail=f"Locataire: {_tenant_name(bill)}",
                    timestamp=parse_datetime_paris(bill.get("due_date")),
                    timestamp_fr=format_french_datetime(bill.get("due_date")),
                    action=NotificationAction(
                        type=ActionType.VIEW_BILL.value,
                        label="Voir la facture",
                        data={"billId": bill.get("id")},
                    ),
                    icon="alert-triangle",
                    color="red",
                )
            )
        return result

    def _new_tenants(self, tenants: list[dict[str, Any]], now: datetime) -> list[Notification]:
        result = []
        for tenant in tenants:
            joined_raw = tenant.get("join_date") or tenant.get("created_at")
            joined = parse_datetime_paris(joined_raw)
            if joined is None or joined <= now - NEW_TENANT_WINDOW:
                continue

            name = tenant.get("name") or tenant.get("full_name") or "Nouveau locataire"
            prop = tenant.get("property") or {}
            result.append(
                Notification(
                    id=f"tenant-{tenant.get('id')}",
                    type=NotificationType.NEW_TENANT,
                    priority=NotificationPriority.MEDIUM,
                    title="Nouveau locataire",
                    message=f"{name} a rejoint",
                    detail=f"Propriété: {prop.get('title') or tenant.get('property_name') or 'N/A'}",
                    timestamp=joined,
                    timestamp_fr=format_french_datetime(joined),
                    action=NotificationAction(
                        type=ActionType.VIEW_TENANT.value,
                        label="Voir le profil",
                        data={"tenantId": tenant.get("id")},
                    ),
                    icon="user-plus",
                    color="blue",
                )
            )
        return result

    def _recent_payments(self, bills: list[dict[str, Any]], now: datetime) -> list[Notification]:
        result = []
        for bill in bills:
            if bill.get("status") != BillStatus.PAID.value:
                continue
            paid_at = parse_datetime_paris(bill.get("payment_date") or bill.get("updated_at"))
            if paid_at is None or paid_at <= now - RECENT_PAYMENT_WINDOW:
                continue

            amount = format_plain_amount(bill.get("amount") or bill.get("total_amount"))
            result.append(
                Notification(
                    id=f"payment-{bill.get('id')}",
                    type=NotificationType.PAYMENT,
                    priority=NotificationPriority.LOW,
                    title="Paiement reçu",
                    message=f"€{amount} reçu",
                    detail=f"De: {_tenant_name(bill)}",
                    timestamp=paid_at,
                    timestamp_fr=format_french_datetime(paid_at),
                    action=NotificationAction(
                        type=ActionType.VIEW_RECEIPT.value,
                        label="Voir le reçu",
                        data={"billId": bill.get("id")},
                    ),
                    icon="check-circle",
                    color="green",
                )
            )
        return result

    def _maintenance(self, properties: list[dict[str, Any]], now: datetime) -> list[Notification]:
        """Simulated signal: a random sample of properties, only when enabled."""
        if not self._simulate_maintenance:
            return []

        result = []
        for prop in properties:
            if self._rng.random() >= self._maintenance_probability:
                continue
            result.append(
                Notification(
                    id=f"maintenance-{prop.get('id')}",
                    type=NotificationType.MAINTENANCE,
                    priority=NotificationPriority.MEDIUM,
                    title="Maintenance requise",
                    message="Maintenance préventive recommandée",
                    detail=f"Propriété: {prop.get('title') or prop.get('name') or 'N/A'}",
                    timestamp=now,
                    timestamp_fr=get_current_french_datetime(now),
                    action=NotificationAction(
                        type=ActionType.VIEW_PROPERTY.value,
                        label="Voir la propriété",
                        data={"propertyId": prop.get("id")},
                    ),
                    icon="wrench",
                    color="orange",
                )
            )
        return result

    def _system_backup(self, now: datetime) -> Notification:
        return Notification(
            id="system-backup",
            type=NotificationType.SYSTEM,
            priority=NotificationPriority.LOW,
            title="Sauvegarde automatique",
            message="Sauvegarde quotidienne terminée avec succès",
            detail="Toutes vos données sont sécurisées",
            timestamp=now,
            timestamp_fr=get_current_french_datetime(now),
            action=NotificationAction(
                type=ActionType.VIEW_BACKUPS.value,
                label="Voir les sauvegardes",
                data={},
            ),
            icon="database",
            color="gray",
        )

    # Mutations

    def mark_as_read(self, notification_id: str) -> bool:
        if not any(n.id == notification_id for n in self._notifications):
            return False
        self._read_ids.add(notification_id)
        self._replace(
            [dataclasses.replace(n, read=True) if n.id == notification_id else n for n in self._notifications]
        )
        return True

    def mark_all_as_read(self) -> None:
        self._read_ids.update(n.id for n in self._notifications)
        self._replace([dataclasses.replace(n, read=True) for n in self._notifications])

    def remove_notification(self, notification_id: str) -> bool:
        remaining = [n for n in self._notifications if n.id != notification_id]
        removed = len(remaining) != len(self._notifications)
        self._replace(remaining)
        return removed

    def create_notification(self, **partial: Any) -> Notification:
        """Build a notification from partial fields, prepend it and broadcast."""
        now = self._clock()
        fields = dict(partial)

        timestamp = parse_datetime_paris(fields.pop("timestamp", None)) or now
        action = fields.pop("action", None)
        if isinstance(action, dict):
            action = NotificationAction(
                type=action.get("type", ""),
                label=action.get("label", ""),
                data=dict(action.get("data") or {}),
            )

        notification = Notification(
            id=fields.pop("id", None) or f"custom-{int(now.timestamp() * 1000)}-{next(self._custom_ids)}",
            type=NotificationType(fields.pop("type", NotificationType.CUSTOM)),
            priority=NotificationPriority(fields.pop("priority", NotificationPriority.MEDIUM)),
            title=fields.pop("title", ""),
            message=fields.pop("message", ""),
            timestamp=timestamp,
            timestamp_fr=fields.pop("timestamp_fr", None) or format_french_datetime(timestamp),
            action=action,
            **fields,
        )
        self._replace([notification, *self._notifications])
        return notification

    # Actions

    def execute_action(self, notification: Notification) -> Optional[UiEvent]:
        """
        Turn a notification's action into a UI event, then mark it read.

        Unknown action types are logged and produce no event.
        """
        if notification.action is None:
            return None

        data = notification.action.data
        action_type = notification.action.type
        event: Optional[UiEvent] = None

        if action_type == ActionType.VIEW_BILL.value:
            event = _navigate(SECTION_PAYMENTS, billId=data.get("billId"))
        elif action_type == ActionType.VIEW_TENANT.value:
            event = _navigate(SECTION_TENANTS, tenantId=data.get("tenantId"))
        elif action_type == ActionType.VIEW_PROPERTY.value:
            event = _navigate(SECTION_PROPERTIES, propertyId=data.get("propertyId"))
        elif action_type == ActionType.VIEW_RECEIPT.value:
            event = UiEvent(type=UiEventType.OPEN_RECEIPT, detail={"billId": data.get("billId")})
        elif action_type == ActionType.VIEW_BACKUPS.value:
            event = _navigate(SECTION_SETTINGS)
        else:
            logger.info("Unrecognised notification action: %s", action_type)

        if event is not None:
            self._ui_events.emit(event)

        self.mark_as_read(notification.id)
        return event

    # Queries

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return next((n for n in self._notifications if n.id == notification_id), None)

    def get_unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.read)

    def get_notifications_by_type(self, notification_type: str) -> list[Notification]:
        return [n for n in self._notifications if n.type == notification_type]

    def get_notifications_by_priority(self, priority: str) -> list[Notification]:
        return [n for n in self._notifications if n.priority == priority]

    def get_stats(self) -> NotificationStats:
        return NotificationStats(
            total=len(self._notifications),
            unread=self.get_unread_count(),
            by_type={t.value: len(self.get_notifications_by_type(t.value)) for t in NotificationType},
            by_priority={p.value: len(self.get_notifications_by_priority(p.value)) for p in NotificationPriority},
            last_updated=get_current_french_datetime(self._last_updated or self._clock()),
        )


def _tenant_name(bill: dict[str, Any]) -> str:
    tenant = bill.get("tenant") or {}
    return tenant.get("name") or bill.get("tenant_name") or "N/A"


def _navigate(section: str, **ids: Any) -> UiEvent:
    detail: dict[str, Any] = {"section": section}
    detail.update({k: v for k, v in ids.items() if v is not None})
    return UiEvent(type=UiEventType.NAVIGATE_TO_SECTION, detail=detail)
