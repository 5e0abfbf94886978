from typing import Any, List, Literal
from fastapi import APIRouter, Depends, Query, status

from ...deps import get_storage
from ....services.storage import Storage
from ....services.revenue import client_revenue_metrics
from ....schemas.revenue import (
    Revenue, RevenueCreate, RevenueUpdate, RevenueWithClient,
    LedgerRevenueMetrics, ClientRevenueMetrics,
)

router = APIRouter()


@router.get("", response_model=List[RevenueWithClient])
async def get_revenue(storage: Storage = Depends(get_storage)) -> Any:
    return await storage.get_revenue()


@router.post("", response_model=Revenue, status_code=status.HTTP_201_CREATED)
async def create_revenue(
    revenue_in: RevenueCreate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.create_revenue(revenue_in.model_dump())


@router.get("/metrics", response_model=None)
async def get_revenue_metrics(
    source: Literal["ledger", "clients"] = Query("ledger"),
    storage: Storage = Depends(get_storage),
) -> Any:
    """Revenue totals from the ledger table, or from live client payment fields"""
    if source == "clients":
        return ClientRevenueMetrics(**client_revenue_metrics(await storage.get_clients()))
    return LedgerRevenueMetrics(**await storage.get_revenue_metrics())


@router.get("/client/{client_id}", response_model=List[Revenue])
async def get_client_revenue(client_id: int, storage: Storage = Depends(get_storage)) -> Any:
    return await storage.get_revenue_by_client(client_id)


@router.put("/{revenue_id}", response_model=Revenue)
async def update_revenue(
    revenue_id: int,
    revenue_in: RevenueUpdate,
    storage: Storage = Depends(get_storage),
) -> Any:
    return await storage.update_revenue(revenue_id, revenue_in.model_dump(exclude_unset=True))
