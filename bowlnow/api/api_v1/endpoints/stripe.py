import json
import logging
from typing import Any
from fastapi import APIRouter, Depends, Request
import stripe

from ...deps import get_gateway, get_invoice_service
from ....core.exceptions import ValidationError
from ....services.invoice_service import InvoiceService
from ....services.stripe_service import StripeGateway
from ....schemas.dashboard import StripeSyncResult, WebhookAck

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync-invoices", response_model=StripeSyncResult)
async def sync_invoices(service: InvoiceService = Depends(get_invoice_service)) -> Any:
    """Reconcile local invoices with the latest Stripe invoices"""
    return StripeSyncResult(**await service.sync_invoices())


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    gateway: StripeGateway = Depends(get_gateway),
    service: InvoiceService = Depends(get_invoice_service),
) -> Any:
    """Handle Stripe invoice payment webhooks"""
    body = await request.body()
    try:
        if gateway.webhook_secret:
            sig_header = request.headers.get("stripe-signature")
            event = gateway.construct_event(body, sig_header)
        else:
            event = json.loads(body or b"{}")
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error(f"Rejected Stripe webhook: {e}")
        raise ValidationError("Webhook handling failed")

    if not isinstance(event, dict):
        raise ValidationError("Webhook handling failed")

    handled = await service.handle_webhook_event(event)
    return WebhookAck(received=True, event_type=event.get("type") or "", handled=handled)
