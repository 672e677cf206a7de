"""Cache models for fetched backend collections."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached resource, keyed by logical name (plus serialized filters).

    IMPORTANT: Never edit the payload; a fresh fetch replaces the whole entry.
    """

    key: str
    payload: Any
    fetched_at_ms: int

    def is_valid(self, now_ms: int, ttl_ms: int) -> bool:
        """Valid while strictly younger than the TTL; expiry is checked lazily on read."""
        return now_ms - self.fetched_at_ms < ttl_ms
