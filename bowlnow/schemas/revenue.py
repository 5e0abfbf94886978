from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import Field

from .base import CamelModel
from .client import Client


class RevenueBase(CamelModel):
    package_type: str = Field(..., min_length=1)
    start_date: datetime
    monthly_recurring_revenue: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    one_time_charges: Decimal = Field(Decimal("0"), max_digits=10, decimal_places=2)
    total_paid: Decimal = Field(Decimal("0"), max_digits=10, decimal_places=2)
    is_active: bool = True


class RevenueCreate(RevenueBase):
    client_id: int


class RevenueUpdate(CamelModel):
    package_type: Optional[str] = Field(None, min_length=1)
    start_date: Optional[datetime] = None
    monthly_recurring_revenue: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    one_time_charges: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    total_paid: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


class Revenue(RevenueBase):
    id: int
    client_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class RevenueWithClient(Revenue):
    client: Client


class LedgerRevenueMetrics(CamelModel):
    """Totals over the revenue ledger table"""
    total_mrr: float = Field(0, alias="totalMRR")
    total_one_time: float = 0
    total_revenue: float = 0


class PackageRevenue(CamelModel):
    type: str
    revenue: float
    clients: int


class MonthlyRevenue(CamelModel):
    month: str
    revenue: float
    clients: int


class ClientRevenueMetrics(CamelModel):
    """Totals derived from the live payment fields on active clients"""
    total_mrr: float = Field(0, alias="totalMRR")
    upsell_potential: float = 0
    total_revenue: float = 0
    paying_clients: int = 0
    by_package: List[PackageRevenue] = []
    history: List[MonthlyRevenue] = []
