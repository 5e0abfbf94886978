from typing import Optional
from datetime import datetime

from .base import CamelModel
from .client import Client


class BoostClientBase(CamelModel):
    kickoff_call_completed: bool = False
    kickoff_call_date: Optional[datetime] = None
    landing_pages_live: bool = False
    landing_pages_date: Optional[datetime] = None
    meta_ads_live: bool = False
    meta_ads_date: Optional[datetime] = None
    google_ads_live: bool = False
    google_ads_date: Optional[datetime] = None
    website_live: bool = False
    website_date: Optional[datetime] = None


class BoostClientCreate(BoostClientBase):
    client_id: int


class BoostClientUpdate(CamelModel):
    kickoff_call_completed: Optional[bool] = None
    kickoff_call_date: Optional[datetime] = None
    landing_pages_live: Optional[bool] = None
    landing_pages_date: Optional[datetime] = None
    meta_ads_live: Optional[bool] = None
    meta_ads_date: Optional[datetime] = None
    google_ads_live: Optional[bool] = None
    google_ads_date: Optional[datetime] = None
    website_live: Optional[bool] = None
    website_date: Optional[datetime] = None


class BoostClient(BoostClientBase):
    id: int
    client_id: Optional[int] = None
    progress_percentage: int
    created_at: datetime
    updated_at: datetime


class BoostClientWithClient(BoostClient):
    client: Client
