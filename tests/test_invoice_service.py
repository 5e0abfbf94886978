from datetime import datetime
from decimal import Decimal

import pytest
import stripe

from bowlnow.services.invoice_service import InvoiceService, next_invoice_number
from bowlnow.services.stripe_service import StripeGateway
from tests.conftest import FakeGateway


async def make_client(storage, email="owner@galaxybowl.test"):
    return await storage.create_client({
        "business_name": "Galaxy Bowl",
        "contact_name": "Alex",
        "email": email,
        "status": "active",
    })


def invoice_data(client_id, amount="199.00"):
    return {
        "client_id": client_id,
        "description": "Monthly CRM",
        "amount": Decimal(amount),
        "due_date": datetime(2024, 5, 1),
    }


@pytest.mark.asyncio
async def test_invoice_numbers_are_sequential(storage):
    client = await make_client(storage)
    service = InvoiceService(storage, FakeGateway())
    year = datetime.utcnow().year

    first, _ = await service.create_invoice(invoice_data(client.id))
    second, _ = await service.create_invoice(invoice_data(client.id))

    assert first.invoice_number == f"INV-{year}-001"
    assert second.invoice_number == f"INV-{year}-002"
    assert await next_invoice_number(storage) == f"INV-{year}-003"


@pytest.mark.asyncio
async def test_gateway_success_links_stripe_invoice(storage):
    client = await make_client(storage)
    gateway = FakeGateway()
    service = InvoiceService(storage, gateway)

    invoice, result = await service.create_invoice(invoice_data(client.id))

    assert result.ok
    assert invoice.stripe_invoice_id == "in_1"
    assert gateway.created[0][0] == client.id


@pytest.mark.asyncio
async def test_gateway_degradation_keeps_local_invoice(storage):
    client = await make_client(storage)
    service = InvoiceService(storage, FakeGateway(fail_with="Your card was declined"))

    invoice, result = await service.create_invoice(invoice_data(client.id))

    assert not result.ok
    assert result.operation == "invoice.create"
    assert result.reason == "Your card was declined"
    assert invoice.id is not None
    assert invoice.stripe_invoice_id is None
    assert invoice.status == "pending"


@pytest.mark.asyncio
async def test_sync_updates_linked_and_imports_unlinked(storage):
    client = await make_client(storage)
    service = InvoiceService(storage, FakeGateway())
    local, _ = await service.create_invoice(invoice_data(client.id))

    service.gateway = FakeGateway(
        invoices=[
            {
                "id": "in_1",
                "status": "paid",
                "metadata": {"bowlnow_invoice_number": local.invoice_number},
                "status_transitions": {"paid_at": 1714521600},
            },
            {
                "id": "in_external",
                "customer": "cus_123",
                "status": "open",
                "amount_due": 2550,
                "due_date": 1714521600,
                "metadata": {},
            },
            {
                "id": "in_stranger",
                "customer": "cus_unknown",
                "status": "open",
                "amount_due": 100,
                "metadata": {},
            },
        ],
        customers={"cus_123": {"id": "cus_123", "email": client.email}},
    )

    result = await service.sync_invoices()

    assert result["synced"] == 1
    assert result["imported"] == 1

    linked = await storage.get_invoice_by_number(local.invoice_number)
    assert linked.status == "paid"
    assert linked.paid_date is not None

    imported = await storage.get_invoice_by_stripe_id("in_external")
    assert imported.client_id == client.id
    assert imported.amount == Decimal("25.50")
    assert imported.status == "pending"
    assert imported.invoice_number.startswith("STRIPE-")

    # A second pass has nothing left to do
    again = await service.sync_invoices()
    assert again["synced"] == 0
    assert again["imported"] == 0


@pytest.mark.asyncio
async def test_sync_reports_unavailable_gateway(storage):
    service = InvoiceService(storage, FakeGateway(fail_with="Stripe is not configured"))

    result = await service.sync_invoices()

    assert result["synced"] == 0
    assert result["imported"] == 0
    assert "unavailable" in result["message"]


@pytest.mark.asyncio
async def test_webhook_marks_invoice_paid_or_overdue(storage):
    client = await make_client(storage)
    service = InvoiceService(storage, FakeGateway())
    paid, _ = await service.create_invoice(invoice_data(client.id))
    failed, _ = await service.create_invoice(invoice_data(client.id))

    def event(event_type, number):
        return {"type": event_type, "data": {"object": {"metadata": {"bowlnow_invoice_number": number}}}}

    assert await service.handle_webhook_event(event("invoice.payment_succeeded", paid.invoice_number))
    assert await service.handle_webhook_event(event("invoice.payment_failed", failed.invoice_number))
    assert not await service.handle_webhook_event(event("customer.created", paid.invoice_number))
    assert not await service.handle_webhook_event(event("invoice.payment_succeeded", "INV-1999-999"))

    assert (await storage.get_invoice(paid.id)).status == "paid"
    assert (await storage.get_invoice(paid.id)).paid_date is not None
    assert (await storage.get_invoice(failed.id)).status == "overdue"


@pytest.mark.asyncio
async def test_sync_with_stripe_objects(storage, monkeypatch):
    client = await make_client(storage)
    listed = stripe.ListObject.construct_from(
        {
            "object": "list",
            "data": [
                {
                    "id": "in_live",
                    "object": "invoice",
                    "customer": "cus_live",
                    "status": "paid",
                    "amount_due": 19900,
                    "metadata": {},
                    "status_transitions": {"paid_at": 1714521600},
                }
            ],
        },
        "sk_test_123",
    )
    customer = stripe.Customer.construct_from(
        {"id": "cus_live", "object": "customer", "email": client.email}, "sk_test_123"
    )
    monkeypatch.setattr(stripe.Invoice, "list", lambda **kwargs: listed)
    monkeypatch.setattr(stripe.Customer, "retrieve", lambda *args, **kwargs: customer)
    service = InvoiceService(storage, StripeGateway(api_key="sk_test_123"))

    result = await service.sync_invoices()

    assert result["imported"] == 1
    imported = await storage.get_invoice_by_stripe_id("in_live")
    assert imported.status == "paid"
    assert imported.amount == Decimal("199.00")
    assert imported.paid_date is not None


@pytest.mark.asyncio
async def test_create_invoice_with_stripe_objects(storage, monkeypatch):
    client = await make_client(storage)
    key = "sk_test_123"
    monkeypatch.setattr(
        stripe.Customer, "list",
        lambda **kwargs: stripe.ListObject.construct_from({"object": "list", "data": []}, key),
    )
    monkeypatch.setattr(
        stripe.Customer, "create",
        lambda **kwargs: stripe.Customer.construct_from({"id": "cus_new", "object": "customer"}, key),
    )
    monkeypatch.setattr(
        stripe.Invoice, "create",
        lambda **kwargs: stripe.Invoice.construct_from({"id": "in_new", "object": "invoice"}, key),
    )
    monkeypatch.setattr(
        stripe.InvoiceItem, "create",
        lambda **kwargs: stripe.InvoiceItem.construct_from({"id": "ii_new", "object": "invoiceitem"}, key),
    )
    monkeypatch.setattr(
        stripe.Invoice, "finalize_invoice",
        lambda *args, **kwargs: stripe.Invoice.construct_from({"id": "in_new", "object": "invoice"}, key),
    )
    service = InvoiceService(storage, StripeGateway(api_key=key))

    invoice, result = await service.create_invoice(invoice_data(client.id))

    assert result.ok
    assert invoice.stripe_invoice_id == "in_new"
