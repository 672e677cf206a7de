"""Application context for in-process service management.

Builds the token store, API client and both services from settings and owns
their startup and teardown. The FastAPI app holds exactly one.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from rentdesk.config.settings import Settings, get_settings
from rentdesk.core.events import EventEmitter
from rentdesk.core.timezone import now_paris
from rentdesk.domain.models import UiEvent
from rentdesk.providers import (
    PropertyApiClient,
    HttpPropertyApiClient,
    StubPropertyApiClient,
    TokenStore,
    FileTokenStore,
)
from rentdesk.services import DataService, NotificationService

logger = logging.getLogger(__name__)


class AppContext:
    """
    Application context providing access to all services.

    Components are created lazily on first access; tests may inject any of
    them through the constructor instead.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api_client: Optional[PropertyApiClient] = None,
        token_store: Optional[TokenStore] = None,
        clock: Callable[[], datetime] = now_paris,
    ):
        self._settings = settings
        self._api_client = api_client
        self._token_store = token_store
        self._clock = clock
        self._ui_events: EventEmitter[UiEvent] = EventEmitter("ui-events")
        self._initialized = False

        # Service instances (lazy initialized)
        self._data_service: Optional[DataService] = None
        self._notification_service: Optional[NotificationService] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def token_store(self) -> TokenStore:
        if self._token_store is None:
            self._token_store = FileTokenStore(self.settings.get_token_path())
        return self._token_store

    @property
    def api_client(self) -> PropertyApiClient:
        if self._api_client is None:
            if self.settings.use_stub_api:
                logger.info("Using stub property backend")
                self._api_client = StubPropertyApiClient()
            else:
                self._api_client = HttpPropertyApiClient(
                    base_url=self.settings.api_base_url,
                    token_store=self.token_store,
                    timeout_seconds=self.settings.request_timeout_seconds,
                )
        return self._api_client

    @property
    def ui_events(self) -> EventEmitter[UiEvent]:
        return self._ui_events

    @property
    def data(self) -> DataService:
        """Get the DataService instance."""
        if self._data_service is None:
            settings = self.settings
            self._data_service = DataService(
                api_client=self.api_client,
                cache_ttl_seconds=settings.cache_ttl_seconds,
                backend_base_url=settings.get_backend_base_url(),
                clock=self._clock,
                auto_refresh_interval_seconds=settings.auto_refresh_interval_seconds,
                timezone_name=settings.timezone,
            )
        return self._data_service

    @property
    def notifications(self) -> NotificationService:
        """Get the NotificationService instance."""
        if self._notification_service is None:
            settings = self.settings
            self._notification_service = NotificationService(
                api_client=self.api_client,
                token_store=self.token_store,
                clock=self._clock,
                poll_interval_seconds=settings.notification_poll_interval_seconds,
                simulate_maintenance=settings.simulate_maintenance,
                maintenance_probability=settings.maintenance_probability,
                ui_events=self._ui_events,
            )
        return self._notification_service

    async def init(self) -> None:
        """Start background work; must run inside the event loop."""
        if self._initialized:
            return
        settings = self.settings
        self.data.init(auto_refresh=settings.auto_refresh_enabled)
        self.notifications.init(polling=settings.notification_polling_enabled)
        self._initialized = True
        logger.info("%s %s started", settings.app_name, settings.app_version)

    async def dispose(self) -> None:
        """Stop timers, wait for running cycles, drop listeners and close the HTTP client."""
        notifications = self._notification_service
        data = self._data_service
        if notifications is not None:
            notifications.stop_polling()
        if data is not None:
            data.stop_auto_refresh()
        if notifications is not None:
            await notifications.drain()
            notifications.dispose()
        if data is not None:
            await data.drain()
            data.dispose()
        self._ui_events.clear()
        if isinstance(self._api_client, HttpPropertyApiClient):
            await self._api_client.aclose()
        self._initialized = False


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or with None, reset) the global application context."""
    global _app_context
    _app_context = context
