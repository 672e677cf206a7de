"""Pydantic schemas for dashboard endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CollectionSummaryResponse(BaseModel):
    """Response schema for one enriched collection."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    active: Optional[int] = None
    data: list[dict[str, Any]]


class BillsSummaryResponse(BaseModel):
    """Response schema for bill counts."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    pending: int
    overdue: int
    paid: int
    data: list[dict[str, Any]]


class DashboardSummaryResponse(BaseModel):
    """Response schema for the dashboard summary."""

    model_config = ConfigDict(from_attributes=True)

    properties: CollectionSummaryResponse
    tenants: CollectionSummaryResponse
    bills: BillsSummaryResponse
    stats: dict[str, Any]
    expenses: CollectionSummaryResponse
    last_updated: str
    last_updated_timestamp: str


class SystemStatusResponse(BaseModel):
    """Response schema for the data cache status."""

    model_config = ConfigDict(from_attributes=True)

    cache_size: int
    is_auto_refresh_active: bool
    is_refreshing: bool
    current_time: str
    timezone: str
    backend_base_url: str


class BillDefaultsResponse(BaseModel):
    """Prefilled values for the new-bill form."""

    tenant_id: int
    property_id: int
    amount: float
    month: str
    due_date: str
    description: str
    status: str
