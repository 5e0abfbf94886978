"""
Stripe bridge.

Every call is best effort: failures are logged and returned as a
``GatewayDegradation`` value instead of raised, so callers decide whether a
missing gateway side effect matters. Local state and Stripe can therefore
diverge; the sync endpoint is how they are brought back together.
"""
import stripe
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, ClassVar, Dict, Optional, Union

from ..core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class GatewaySuccess:
    value: Any = None
    ok: ClassVar[bool] = True


@dataclass
class GatewayDegradation:
    operation: str
    reason: str
    ok: ClassVar[bool] = False


GatewayResult = Union[GatewaySuccess, GatewayDegradation]


def to_plain(value: Any) -> Any:
    """Convert Stripe objects (and anything nested in them) to dicts and lists"""
    if isinstance(value, stripe.StripeObject):
        value = value.to_dict()
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_plain(v) for v in value]
    return value


def to_cents(amount: Any) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeGateway:
    """Service for handling Stripe operations"""

    def __init__(self, api_key: Optional[str] = None, currency: str = "usd", webhook_secret: Optional[str] = None):
        self.api_key = api_key
        self.currency = currency
        self.webhook_secret = webhook_secret

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _call(self, operation: str, fn: Callable[..., Any], *args, **kwargs) -> GatewayResult:
        if not self.enabled:
            return GatewayDegradation(operation, "Stripe is not configured")
        try:
            return GatewaySuccess(to_plain(fn(*args, api_key=self.api_key, **kwargs)))
        except Exception as e:
            logger.warning(f"Stripe {operation} failed: {e}")
            return GatewayDegradation(operation, str(e))

    def find_or_create_customer(self, client) -> GatewayResult:
        """Match a Stripe customer by email, creating one when none exists"""
        found = self._call("customer.list", stripe.Customer.list, email=client.email, limit=1)
        if not found.ok:
            return found
        data = found.value.get("data") or []
        if data:
            return GatewaySuccess(data[0])
        return self._call(
            "customer.create",
            stripe.Customer.create,
            name=client.business_name,
            email=client.email,
            metadata={"bowlnow_client_id": str(client.id)},
        )

    def create_invoice(self, client, invoice_number: str, amount: Any, description: Optional[str] = None) -> GatewayResult:
        """Create, itemize and finalize a Stripe invoice; value is the Stripe invoice id"""
        customer = self.find_or_create_customer(client)
        if not customer.ok:
            return customer
        customer_id = customer.value["id"]

        created = self._call(
            "invoice.create",
            stripe.Invoice.create,
            customer=customer_id,
            description=description or f"Invoice {invoice_number}",
            metadata={
                "bowlnow_invoice_number": invoice_number,
                "bowlnow_client_id": str(client.id),
            },
        )
        if not created.ok:
            return created
        stripe_invoice_id = created.value["id"]

        item = self._call(
            "invoice_item.create",
            stripe.InvoiceItem.create,
            customer=customer_id,
            invoice=stripe_invoice_id,
            amount=to_cents(amount),
            currency=self.currency,
            description=description or f"Service - {client.business_name}",
        )
        if not item.ok:
            return item

        finalized = self._call("invoice.finalize", stripe.Invoice.finalize_invoice, stripe_invoice_id)
        if not finalized.ok:
            return finalized
        return GatewaySuccess(stripe_invoice_id)

    def list_invoices(self, limit: int = 100) -> GatewayResult:
        listed = self._call("invoice.list", stripe.Invoice.list, limit=limit)
        if not listed.ok:
            return listed
        return GatewaySuccess(list(listed.value.get("data") or []))

    def retrieve_customer(self, customer_id: str) -> GatewayResult:
        return self._call("customer.retrieve", stripe.Customer.retrieve, customer_id)

    def construct_event(self, payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
        """Verify a webhook signature; raises ValueError or SignatureVerificationError"""
        return to_plain(stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret))


def get_stripe_gateway() -> StripeGateway:
    return StripeGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        currency=settings.STRIPE_CURRENCY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
    )


def stripe_invoice_status(stripe_status: Optional[str]) -> str:
    """Local status for a Stripe invoice status"""
    if stripe_status == "paid":
        return "paid"
    if stripe_status == "open":
        return "pending"
    return "overdue"
