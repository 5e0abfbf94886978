"""CSV reports with fixed column sets."""
import csv
import io
from decimal import Decimal
from typing import Any, Iterable, Sequence

CLIENT_COLUMNS = ["Business Name", "Contact", "Email", "Phone", "Status", "Client Type"]
REVENUE_COLUMNS = ["Client", "Package Type", "Start Date", "MRR", "One-Time", "Total Paid"]


def text(value: Any) -> str:
    return "" if value is None else str(value)


def money(value: Any) -> Decimal:
    # Decimal cells are numeric, so they are written unquoted as e.g. 12.50
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def render_csv(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Plain header row, then data rows with every non-numeric cell quoted"""
    output = io.StringIO()
    output.write(",".join(columns) + "\n")
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(rows)
    return output.getvalue()


def clients_csv(clients: Iterable[Any]) -> str:
    rows = (
        [
            text(c.business_name),
            text(c.contact_name),
            text(c.email),
            text(c.phone),
            text(c.status),
            text(c.client_type),
        ]
        for c in clients
    )
    return render_csv(CLIENT_COLUMNS, rows)


def revenue_csv(entries: Iterable[Any]) -> str:
    rows = (
        [
            text(r.client.business_name if r.client else None),
            text(r.package_type),
            r.start_date.date().isoformat() if r.start_date else "",
            money(r.monthly_recurring_revenue),
            money(r.one_time_charges),
            money(r.total_paid),
        ]
        for r in entries
    )
    return render_csv(REVENUE_COLUMNS, rows)
