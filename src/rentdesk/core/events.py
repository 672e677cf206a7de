"""
Synchronous, ordered publish/subscribe.

Listeners run in registration order on the caller's stack. A listener that
raises is logged and skipped so one broken subscriber cannot starve the rest.
"""

import logging
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class Subscription(Generic[T]):
    """Handle returned by subscribe(); call it (or unsubscribe()) to detach."""

    def __init__(self, emitter: "EventEmitter[T]", listener: Listener):
        self._emitter: Optional[EventEmitter[T]] = emitter
        self._listener = listener

    @property
    def active(self) -> bool:
        return self._emitter is not None

    def unsubscribe(self) -> None:
        if self._emitter is not None:
            self._emitter._remove(self)
            self._emitter = None

    def __call__(self) -> None:
        self.unsubscribe()


class EventEmitter(Generic[T]):
    """Ordered listener registry delivering one payload type."""

    def __init__(self, name: str = "events"):
        self._name = name
        self._subscriptions: list[Subscription[T]] = []

    def subscribe(self, listener: Listener) -> Subscription[T]:
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, payload: T) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for subscription in list(self._subscriptions):
            try:
                subscription._listener(payload)
            except Exception:
                logger.exception("Listener on %s failed", self._name)

    def clear(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription[T]) -> None:
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]
