from typing import Optional
from datetime import datetime
from decimal import Decimal
from pydantic import Field

from .base import CamelModel
from .client import Client
from ..models.invoice import InvoiceStatus, InvoiceFrequency


class InvoiceBase(CamelModel):
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.PENDING
    frequency: InvoiceFrequency = InvoiceFrequency.ONE_TIME
    due_date: datetime
    paid_date: Optional[datetime] = None


class InvoiceCreate(InvoiceBase):
    """Invoice number is generated server side and never accepted from callers"""
    client_id: int
    stripe_payment_intent_id: Optional[str] = None


class InvoiceUpdate(CamelModel):
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: Optional[InvoiceStatus] = None
    frequency: Optional[InvoiceFrequency] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    stripe_payment_intent_id: Optional[str] = None
    stripe_invoice_id: Optional[str] = None


class Invoice(InvoiceBase):
    id: int
    client_id: Optional[int] = None
    invoice_number: str
    stripe_payment_intent_id: Optional[str] = None
    stripe_invoice_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class InvoiceWithClient(Invoice):
    client: Client


class GatewayReport(CamelModel):
    """Outcome of the best-effort Stripe mirror of a local invoice"""
    ok: bool
    operation: Optional[str] = None
    reason: Optional[str] = None


class InvoiceCreated(Invoice):
    gateway: GatewayReport
