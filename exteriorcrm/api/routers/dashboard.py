"""Dashboard router."""

from fastapi import APIRouter, Depends

from exteriorcrm.api.context import get_store
from exteriorcrm.api.schemas.dashboard import DashboardStats
from exteriorcrm.services.store import CRMStore

router = APIRouter(prefix="/dashboard")


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(store: CRMStore = Depends(get_store)) -> DashboardStats:
    """Headline pipeline figures."""
    return DashboardStats(**await store.dashboard_stats())
