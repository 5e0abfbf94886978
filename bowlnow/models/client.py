from sqlalchemy import Column, String, Text, JSON
from sqlalchemy.orm import relationship
import enum
from .base import IntegerBaseModel


class ClientStatus(str, enum.Enum):
    PROSPECT = "prospect"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class ClientType(str, enum.Enum):
    CRM = "crm"
    CRM_ADS = "crm_ads"
    WEBSITE_ONLY = "website_only"
    FULL_SERVICE = "full_service"


class Client(IntegerBaseModel):
    """Business under management; the root of every other record"""
    __tablename__ = "clients"

    business_name = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50))

    status = Column(String(50), nullable=False, default=ClientStatus.PROSPECT.value, index=True)
    client_type = Column(String(50))  # crm, crm_ads, website_only, full_service
    tags = Column(JSON, default=list)
    web_slug = Column(String(255))
    notes = Column(Text)
    preferred_communication = Column(String(50), default="email")

    # Free-text currency strings as entered or imported, e.g. "$1,250.00"
    current_payment = Column(String(50))
    proposed_payment = Column(String(50))
    upsell_amount = Column(String(50))

    # Relationships
    boost_client = relationship("BoostClient", back_populates="client", uselist=False)
    invoices = relationship("Invoice", back_populates="client")
    contacts = relationship("Contact", back_populates="client")
    revenue_entries = relationship("Revenue", back_populates="client")
    onboarding_forms = relationship("OnboardingForm", back_populates="client")

    @property
    def is_full_service(self):
        return self.client_type == ClientType.FULL_SERVICE.value
