from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import relationship
from .base import IntegerBaseModel


class Revenue(IntegerBaseModel):
    """Revenue ledger entry, kept apart from the live payment fields on Client"""
    __tablename__ = "revenue"

    client_id = Column(Integer, ForeignKey("clients.id"), index=True)
    package_type = Column(String(50), nullable=False)  # crm, crm_ads, website_only, full_service
    start_date = Column(DateTime, nullable=False)
    monthly_recurring_revenue = Column(Numeric(10, 2))
    one_time_charges = Column(Numeric(10, 2), default=0)
    total_paid = Column(Numeric(10, 2), default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    client = relationship("Client", back_populates="revenue_entries")
