from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from .base import IntegerBaseModel

# (flag column, completion date column) in tracker order
MILESTONES = (
    ("kickoff_call_completed", "kickoff_call_date"),
    ("landing_pages_live", "landing_pages_date"),
    ("meta_ads_live", "meta_ads_date"),
    ("google_ads_live", "google_ads_date"),
    ("website_live", "website_date"),
)


class BoostClient(IntegerBaseModel):
    """Onboarding progress for a full-service client"""
    __tablename__ = "boost_clients"

    client_id = Column(Integer, ForeignKey("clients.id"), unique=True, index=True)

    kickoff_call_completed = Column(Boolean, default=False, nullable=False)
    kickoff_call_date = Column(DateTime)
    landing_pages_live = Column(Boolean, default=False, nullable=False)
    landing_pages_date = Column(DateTime)
    meta_ads_live = Column(Boolean, default=False, nullable=False)
    meta_ads_date = Column(DateTime)
    google_ads_live = Column(Boolean, default=False, nullable=False)
    google_ads_date = Column(DateTime)
    website_live = Column(Boolean, default=False, nullable=False)
    website_date = Column(DateTime)

    # Cached value; recomputed from the flags on every write
    progress_percentage = Column(Integer, default=0, nullable=False)

    client = relationship("Client", back_populates="boost_client")

    @property
    def milestone_flags(self):
        return [bool(getattr(self, flag)) for flag, _ in MILESTONES]
