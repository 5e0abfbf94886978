from sqlalchemy import Column, String, Text, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import relationship
import enum
from .base import IntegerBaseModel


class InvoiceStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELED = "canceled"


class InvoiceFrequency(str, enum.Enum):
    ONE_TIME = "one_time"
    MONTHLY = "monthly"


class Invoice(IntegerBaseModel):
    __tablename__ = "invoices"

    client_id = Column(Integer, ForeignKey("clients.id"), index=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=InvoiceStatus.PENDING.value, index=True)
    frequency = Column(String(20), default=InvoiceFrequency.ONE_TIME.value)
    due_date = Column(DateTime, nullable=False)
    paid_date = Column(DateTime)

    # Stripe identifiers; empty when the gateway call degraded
    stripe_payment_intent_id = Column(String(100))
    stripe_invoice_id = Column(String(100), index=True)

    client = relationship("Client", back_populates="invoices")
