"""Remote API client protocol."""

from typing import Any, Optional, Protocol

# Decoded JSON body: {"success": bool, "data": {...}}
EnvelopeBody = dict[str, Any]


class PropertyApiClient(Protocol):
    """
    Protocol for the property-management backend.

    Every method returns the decoded envelope body. Transport failures are
    raised as ApiError / ApiConnectionError; envelope validation is left to
    the caller.
    """

    async def list_properties(self) -> EnvelopeBody:
        """GET /properties -> data.properties"""
        ...

    async def list_tenants(self) -> EnvelopeBody:
        """GET /tenants -> data.tenants"""
        ...

    async def list_bills(self, filters: Optional[dict[str, Any]] = None) -> EnvelopeBody:
        """GET /bills with filters as query params -> data.bills"""
        ...

    async def get_bills_stats(self) -> EnvelopeBody:
        """GET /bills/stats -> data (object)"""
        ...

    async def list_expenses(self) -> EnvelopeBody:
        """GET /expenses -> data.expenses"""
        ...

    async def get_property_photos(self, property_id: Any) -> EnvelopeBody:
        """GET /properties/{id}/photos -> data.photos"""
        ...
