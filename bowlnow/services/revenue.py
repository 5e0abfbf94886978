"""
Revenue figures.

Two representations coexist and are not reconciled: the free-text payment
fields on each Client (live MRR as the dashboard shows it) and the Revenue
ledger table (historical entries). Both are exposed; callers choose.
"""
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.client import ClientStatus
from ..models.revenue import Revenue


_NON_NUMERIC = re.compile(r"[^0-9.\-]+")


def parse_currency(value: Any) -> float:
    """Lossy parse of a currency string such as "$1,250.00".

    Everything except digits, dots and minus signs is stripped before the
    float conversion; empty or unparseable input is 0.0. "1.2.3" or "5-3"
    therefore parse to 0.0 rather than raising.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _field(client: Any, name: str) -> Any:
    if isinstance(client, dict):
        return client.get(name)
    return getattr(client, name, None)


def active_clients(clients: Iterable[Any]) -> List[Any]:
    return [c for c in clients if _field(c, "status") == ClientStatus.ACTIVE.value]


def paying_clients(clients: Iterable[Any]) -> List[Any]:
    """Active clients whose current payment parses to a positive amount"""
    return [
        c for c in active_clients(clients)
        if _field(c, "current_payment") and parse_currency(_field(c, "current_payment")) > 0
    ]


def summarize_client_revenue(clients: Iterable[Any]) -> Dict[str, Any]:
    clients = list(clients)
    paying = paying_clients(clients)

    total_mrr = 0.0
    upsell_potential = 0.0
    for client in paying:
        monthly = parse_currency(_field(client, "current_payment"))
        total_mrr += monthly
        # Upsell is potential only, never counted as revenue
        upsell = parse_currency(_field(client, "upsell_amount"))
        upsell_potential += max(0.0, upsell - monthly)

    return {
        "total_mrr": total_mrr,
        "upsell_potential": upsell_potential,
        "total_revenue": total_mrr,
        "paying_clients": len(paying),
    }


def revenue_by_package(clients: Iterable[Any]) -> List[Dict[str, Any]]:
    stats: Dict[str, Dict[str, Any]] = {}
    for client in active_clients(clients):
        package_type = _field(client, "client_type") or "unknown"
        entry = stats.setdefault(package_type, {"type": package_type, "revenue": 0.0, "clients": 0})
        entry["revenue"] += parse_currency(_field(client, "current_payment"))
        entry["clients"] += 1
    return list(stats.values())


def historical_revenue(clients: Iterable[Any], months: int = 12, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Trailing monthly series, oldest first.

    There is no per-month payment history on clients, so each month carries
    the current paying MRR.
    """
    today = today or date.today()
    summary = summarize_client_revenue(clients)
    series = []
    for offset in range(months - 1, -1, -1):
        year, month = today.year, today.month - offset
        while month <= 0:
            month += 12
            year -= 1
        label = date(year, month, 1).strftime("%b %Y")
        series.append({
            "month": label,
            "revenue": summary["total_mrr"],
            "clients": summary["paying_clients"],
        })
    return series


def client_revenue_metrics(clients: Iterable[Any], today: Optional[date] = None) -> Dict[str, Any]:
    clients = list(clients)
    metrics = summarize_client_revenue(clients)
    metrics["by_package"] = revenue_by_package(clients)
    metrics["history"] = historical_revenue(clients, today=today)
    return metrics


async def ledger_revenue_metrics(db: AsyncSession) -> Dict[str, float]:
    """Totals over the revenue ledger"""
    result = await db.execute(
        select(
            func.coalesce(
                func.sum(case((Revenue.is_active == True, Revenue.monthly_recurring_revenue), else_=0)), 0  # noqa: E712
            ).label("total_mrr"),
            func.coalesce(func.sum(Revenue.one_time_charges), 0).label("total_one_time"),
            func.coalesce(func.sum(Revenue.total_paid), 0).label("total_revenue"),
        )
    )
    row = result.first()
    if row is None:
        return {"total_mrr": 0.0, "total_one_time": 0.0, "total_revenue": 0.0}
    return {
        "total_mrr": float(row.total_mrr or 0),
        "total_one_time": float(row.total_one_time or 0),
        "total_revenue": float(row.total_revenue or 0),
    }
