from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from bowlnow.services.csv_export import clients_csv, revenue_csv, money


def test_money_has_two_decimals():
    assert str(money(Decimal("12.5"))) == "12.50"
    assert str(money(None)) == "0.00"


def test_clients_csv():
    clients = [
        SimpleNamespace(
            business_name='Lucky, "Lanes"',
            contact_name="Sam",
            email="sam@lucky.test",
            phone=None,
            status="active",
            client_type="crm",
        )
    ]

    lines = clients_csv(clients).split("\n")

    assert lines[0] == "Business Name,Contact,Email,Phone,Status,Client Type"
    assert lines[1] == '"Lucky, ""Lanes""","Sam","sam@lucky.test","","active","crm"'


def test_revenue_csv():
    entries = [
        SimpleNamespace(
            client=SimpleNamespace(business_name="Lucky Lanes"),
            package_type="full_service",
            start_date=datetime(2024, 3, 1, 9, 30),
            monthly_recurring_revenue=Decimal("499"),
            one_time_charges=Decimal("0"),
            total_paid=Decimal("1497.00"),
        )
    ]

    lines = revenue_csv(entries).split("\n")

    assert lines[0] == "Client,Package Type,Start Date,MRR,One-Time,Total Paid"
    assert lines[1] == '"Lucky Lanes","full_service","2024-03-01",499.00,0.00,1497.00'


def test_one_row_per_entity():
    client = SimpleNamespace(
        business_name="A", contact_name="B", email="c@d.test", phone="1", status="prospect", client_type=None
    )
    assert clients_csv([client, client]).count("\n") == 3


def test_empty_export_is_header_only():
    assert clients_csv([]) == "Business Name,Contact,Email,Phone,Status,Client Type\n"
