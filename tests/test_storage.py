from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import select

from bowlnow.core.exceptions import NotFoundError, ValidationError
from bowlnow.models.contact import Contact


def new_client(**overrides):
    data = {
        "business_name": "Pin Palace",
        "contact_name": "Lee",
        "email": "lee@pinpalace.test",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_create_client_uses_default_status(storage):
    pipeline = await storage.create_client(new_client())
    managed = await storage.create_client(new_client(email="b@pinpalace.test"), default_status="active")
    explicit = await storage.create_client(new_client(email="c@pinpalace.test", status="past_due"), default_status="active")

    assert pipeline.status == "prospect"
    assert managed.status == "active"
    assert explicit.status == "past_due"


@pytest.mark.asyncio
async def test_create_client_rejects_unknown_status(storage):
    with pytest.raises(ValidationError):
        await storage.create_client(new_client(status="archived"))


@pytest.mark.asyncio
async def test_update_client_status(storage):
    client = await storage.create_client(new_client())

    updated = await storage.update_client_status(client.id, "canceled")
    assert updated.status == "canceled"

    with pytest.raises(ValidationError):
        await storage.update_client_status(client.id, "lost")
    with pytest.raises(NotFoundError):
        await storage.update_client_status(9999, "active")


@pytest.mark.asyncio
async def test_update_client_rejects_blank_required_field(storage):
    client = await storage.create_client(new_client())
    with pytest.raises(ValidationError):
        await storage.update_client(client.id, {"business_name": "  "})


@pytest.mark.asyncio
async def test_full_service_client_gets_boost_tracking(storage):
    client = await storage.create_client(new_client(client_type="full_service"))

    boost = await storage.get_boost_client(client.id)
    assert boost is not None
    assert boost.progress_percentage == 0

    # Upgrading an existing client starts tracking too
    other = await storage.create_client(new_client(email="o@pinpalace.test", client_type="crm"))
    assert await storage.get_boost_client(other.id) is None
    await storage.update_client(other.id, {"client_type": "full_service"})
    assert await storage.get_boost_client(other.id) is not None


@pytest.mark.asyncio
async def test_boost_update_recomputes_progress_and_stamps_dates(storage):
    client = await storage.create_client(new_client(client_type="full_service"))

    boost = await storage.update_boost_client(
        client.id, {"kickoff_call_completed": True, "landing_pages_live": True}
    )

    assert boost.progress_percentage == 40
    assert boost.kickoff_call_date is not None
    assert boost.meta_ads_date is None


@pytest.mark.asyncio
async def test_duplicate_boost_client_is_rejected(storage):
    client = await storage.create_client(new_client(client_type="full_service"))
    with pytest.raises(ValidationError):
        await storage.create_boost_client({"client_id": client.id})


async def _client_with_children(storage):
    client = await storage.create_client(new_client())
    invoice = await storage.create_invoice({
        "client_id": client.id,
        "invoice_number": "INV-2024-001",
        "description": "Setup",
        "amount": Decimal("250.00"),
        "due_date": datetime(2024, 1, 31),
    })
    contact = await storage.create_contact({"client_id": client.id, "name": "Front desk"})
    return client, invoice.id, contact.id


@pytest.mark.asyncio
async def test_delete_client_orphans_children(storage):
    client, invoice_id, contact_id = await _client_with_children(storage)

    await storage.delete_client(client.id, policy="orphan")

    assert await storage.get_client(client.id) is None
    invoice = await storage.get_invoice(invoice_id)
    assert invoice is not None
    assert invoice.client_id is None
    # Orphans drop out of client-joined listings
    assert await storage.get_invoices() == []


@pytest.mark.asyncio
async def test_delete_client_cascades_children(storage):
    client, invoice_id, contact_id = await _client_with_children(storage)

    await storage.delete_client(client.id, policy="cascade")

    assert await storage.get_invoice(invoice_id) is None
    assert await storage.get_all_invoices() == []
    result = await storage.db.execute(select(Contact).where(Contact.id == contact_id))
    assert result.scalar_one_or_none() is None


@pytest.mark.asyncio
async def test_delete_client_rejects_unknown_policy(storage):
    client = await storage.create_client(new_client())
    with pytest.raises(ValidationError):
        await storage.delete_client(client.id, policy="archive")


@pytest.mark.asyncio
async def test_invoice_number_is_immutable(storage):
    client, invoice_id, _ = await _client_with_children(storage)

    invoice = await storage.update_invoice(invoice_id, {"invoice_number": "HACKED", "status": "paid"})

    assert invoice.invoice_number == "INV-2024-001"
    assert invoice.status == "paid"


@pytest.mark.asyncio
async def test_onboarding_form_progress(storage):
    form = await storage.create_onboarding_form({"business_name": "Pin Palace", "email": "lee@pinpalace.test"})
    assert form.completion_progress == 17

    form = await storage.update_onboarding_form(form.id, {"is_completed": True})
    assert form.completion_progress == 100


@pytest.mark.asyncio
async def test_dashboard_metrics(storage):
    await storage.create_client(new_client())
    await storage.create_client(new_client(email="a@pinpalace.test", status="active"))
    await storage.create_client(new_client(email="p@pinpalace.test", status="past_due"))

    metrics = await storage.get_dashboard_metrics()

    assert metrics["total_clients"] == 3
    assert metrics["active_clients"] == 1
    assert metrics["prospects"] == 1
    assert metrics["overdue"] == 1
    assert metrics["total_mrr"] == 0.0


@pytest.mark.asyncio
async def test_delete_missing_contact(storage):
    with pytest.raises(NotFoundError):
        await storage.delete_contact(12345)
