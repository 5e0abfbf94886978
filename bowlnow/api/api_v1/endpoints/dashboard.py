from typing import Any
from fastapi import APIRouter, Depends

from ...deps import get_storage
from ....services.storage import Storage
from ....schemas.dashboard import DashboardMetrics

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics)
async def get_dashboard_metrics(storage: Storage = Depends(get_storage)) -> Any:
    return DashboardMetrics(**await storage.get_dashboard_metrics())
