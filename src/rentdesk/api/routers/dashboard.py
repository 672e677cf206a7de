"""Dashboard data endpoints."""

from fastapi import APIRouter, Depends

from rentdesk.api.deps import get_data_service
from rentdesk.api.schemas import (
    DashboardSummaryResponse,
    SystemStatusResponse,
    BillDefaultsResponse,
)
from rentdesk.services import DataService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_summary(
    data: DataService = Depends(get_data_service),
) -> DashboardSummaryResponse:
    """Aggregate of properties, tenants, recent bills, bill stats and expenses."""
    summary = await data.get_dashboard_summary()
    return DashboardSummaryResponse.model_validate(summary)


@router.get("/status", response_model=SystemStatusResponse)
async def get_status(data: DataService = Depends(get_data_service)) -> SystemStatusResponse:
    """Cache and auto-refresh status."""
    return SystemStatusResponse.model_validate(data.get_system_status())


@router.post("/cache/clear", response_model=SystemStatusResponse)
async def clear_cache(data: DataService = Depends(get_data_service)) -> SystemStatusResponse:
    """Drop every cached collection."""
    data.clear_cache()
    return SystemStatusResponse.model_validate(data.get_system_status())


@router.post("/refresh", response_model=SystemStatusResponse)
async def refresh(data: DataService = Depends(get_data_service)) -> SystemStatusResponse:
    """Refetch every collection now (errors are logged, not returned)."""
    await data.refresh_all_data()
    return SystemStatusResponse.model_validate(data.get_system_status())


@router.get("/bills/defaults", response_model=BillDefaultsResponse)
async def get_bill_defaults(data: DataService = Depends(get_data_service)) -> BillDefaultsResponse:
    """Prefilled values for a new bill."""
    return BillDefaultsResponse(**data.get_new_bill_defaults())
