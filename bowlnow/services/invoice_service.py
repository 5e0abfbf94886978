import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..models.invoice import Invoice, InvoiceStatus, InvoiceFrequency
from .storage import Storage
from .stripe_service import StripeGateway, GatewayResult, stripe_invoice_status

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "INV"
IMPORTED_INVOICE_PREFIX = "STRIPE"


def format_invoice_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}-{year}-{sequence:03d}"


async def next_invoice_number(storage: Storage, prefix: str = INVOICE_PREFIX, year: Optional[int] = None) -> str:
    """Next free number in the ``<prefix>-<year>-NNN`` series"""
    year = year or datetime.utcnow().year
    stem = f"{prefix}-{year}-"
    highest = 0
    for number in await storage.get_invoice_numbers(stem):
        suffix = number[len(stem):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return format_invoice_number(prefix, year, highest + 1)


def _timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.utcfromtimestamp(value)


def _paid_at(stripe_invoice: Dict[str, Any]) -> Optional[datetime]:
    if stripe_invoice.get("status") != "paid":
        return None
    transitions = stripe_invoice.get("status_transitions") or {}
    return _timestamp(transitions.get("paid_at"))


class InvoiceService:
    """Local invoices mirrored to Stripe on a best-effort basis"""

    def __init__(self, storage: Storage, gateway: StripeGateway):
        self.storage = storage
        self.gateway = gateway

    async def create_invoice(self, data: Dict[str, Any]) -> Tuple[Invoice, GatewayResult]:
        """Create a local invoice and try to mirror it to Stripe.

        The local invoice is written whatever the gateway outcome; on
        degradation it simply carries no Stripe invoice id.
        """
        data = dict(data)
        client = await self.storage.require_client(data["client_id"])
        invoice_number = await next_invoice_number(self.storage)

        result = self.gateway.create_invoice(
            client,
            invoice_number,
            data["amount"],
            description=data.get("description"),
        )
        if result.ok:
            data["stripe_invoice_id"] = result.value
        else:
            logger.warning(
                f"Invoice {invoice_number} created without Stripe mirror "
                f"({result.operation}: {result.reason})"
            )

        invoice = await self.storage.create_invoice({**data, "invoice_number": invoice_number})
        logger.info(f"Created invoice {invoice_number} for client {client.id}")
        return invoice, result

    async def sync_invoices(self) -> Dict[str, Any]:
        """Pull up to 100 Stripe invoices: update linked ones, import unknown ones"""
        listed = self.gateway.list_invoices(limit=100)
        if not listed.ok:
            logger.warning(f"Stripe sync skipped: {listed.reason}")
            return {"message": f"Stripe sync unavailable: {listed.reason}", "synced": 0, "imported": 0}

        synced = 0
        imported = 0
        for stripe_invoice in listed.value:
            metadata = stripe_invoice.get("metadata") or {}
            local_number = metadata.get("bowlnow_invoice_number")
            if local_number:
                if await self._sync_linked(local_number, stripe_invoice):
                    synced += 1
            elif await self._import_unlinked(stripe_invoice):
                imported += 1

        logger.info(f"Stripe sync: {synced} updated, {imported} imported")
        return {
            "message": f"Synced {synced} existing invoices and imported {imported} new invoices from Stripe",
            "synced": synced,
            "imported": imported,
        }

    async def _sync_linked(self, invoice_number: str, stripe_invoice: Dict[str, Any]) -> bool:
        invoice = await self.storage.get_invoice_by_number(invoice_number)
        if invoice is None:
            return False
        status = stripe_invoice_status(stripe_invoice.get("status"))
        if invoice.status == status:
            return False
        await self.storage.update_invoice(invoice.id, {"status": status, "paid_date": _paid_at(stripe_invoice)})
        return True

    async def _import_unlinked(self, stripe_invoice: Dict[str, Any]) -> bool:
        stripe_invoice_id = stripe_invoice.get("id")
        customer_id = stripe_invoice.get("customer")
        if not stripe_invoice_id or not customer_id:
            return False
        if await self.storage.get_invoice_by_stripe_id(stripe_invoice_id) is not None:
            return False

        customer = self.gateway.retrieve_customer(customer_id)
        if not customer.ok:
            logger.warning(f"Skipping Stripe invoice {stripe_invoice_id}: {customer.reason}")
            return False
        if customer.value.get("deleted") or not customer.value.get("email"):
            return False

        matches = await self.storage.get_clients_by_email(customer.value["email"])
        if not matches:
            return False

        amount_due = stripe_invoice.get("amount_due") or 0
        due_date = _timestamp(stripe_invoice.get("due_date")) or datetime.utcnow()
        await self.storage.create_invoice({
            "client_id": matches[0].id,
            "invoice_number": await next_invoice_number(self.storage, prefix=IMPORTED_INVOICE_PREFIX),
            "description": stripe_invoice.get("description") or f"Imported from Stripe - {stripe_invoice_id}",
            "amount": Decimal(amount_due) / 100,
            "status": stripe_invoice_status(stripe_invoice.get("status")),
            "frequency": InvoiceFrequency.ONE_TIME.value,
            "due_date": due_date,
            "paid_date": _paid_at(stripe_invoice),
            "stripe_invoice_id": stripe_invoice_id,
        })
        return True

    async def handle_webhook_event(self, event: Dict[str, Any]) -> bool:
        """Apply a Stripe event; returns True when a local invoice changed"""
        event_type = event.get("type")
        if event_type not in ("invoice.payment_succeeded", "invoice.payment_failed"):
            return False

        stripe_invoice = (event.get("data") or {}).get("object") or {}
        invoice_number = (stripe_invoice.get("metadata") or {}).get("bowlnow_invoice_number")
        if not invoice_number:
            return False
        invoice = await self.storage.get_invoice_by_number(invoice_number)
        if invoice is None:
            logger.warning(f"Webhook {event_type} for unknown invoice {invoice_number}")
            return False

        if event_type == "invoice.payment_succeeded":
            await self.storage.update_invoice(invoice.id, {
                "status": InvoiceStatus.PAID.value,
                "paid_date": datetime.utcnow(),
            })
            logger.info(f"Invoice {invoice_number} marked as paid via Stripe webhook")
        else:
            await self.storage.update_invoice(invoice.id, {"status": InvoiceStatus.OVERDUE.value})
            logger.info(f"Invoice {invoice_number} marked as overdue via Stripe webhook")
        return True
