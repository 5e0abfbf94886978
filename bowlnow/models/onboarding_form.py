from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, Numeric, JSON
from sqlalchemy.orm import relationship
from .base import IntegerBaseModel


class OnboardingForm(IntegerBaseModel):
    """Client intake form, saved incrementally while it is filled in"""
    __tablename__ = "onboarding_forms"

    client_id = Column(Integer, ForeignKey("clients.id"), index=True)

    # Business information
    business_name = Column(String(255))
    contact_name = Column(String(255))
    phone = Column(String(50))
    email = Column(String(255))
    client_type = Column(String(50))
    preferred_communication = Column(String(50))
    web_slug = Column(String(255))

    # Goals and marketing
    goals = Column(Text)
    monthly_ad_budget = Column(Numeric(10, 2))
    promotions = Column(Text)
    asset_file_names = Column(Text)
    landing_page_choice = Column(String(100))
    customizations = Column(Text)
    ad_channels = Column(JSON, default=list)
    full_website = Column(Boolean)
    additional_contacts = Column(JSON, default=list)  # [{name, email, phone}]

    completion_progress = Column(Integer, default=0, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)

    client = relationship("Client", back_populates="onboarding_forms")
