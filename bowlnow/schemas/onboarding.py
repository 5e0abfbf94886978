from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import Field, field_validator

from .base import CamelModel
from .client import Client


class AdditionalContact(CamelModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class OnboardingFormBase(CamelModel):
    client_id: Optional[int] = None
    business_name: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    client_type: Optional[str] = None
    preferred_communication: Optional[str] = None
    web_slug: Optional[str] = None
    goals: Optional[str] = None
    monthly_ad_budget: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    promotions: Optional[str] = None
    asset_file_names: Optional[str] = None
    landing_page_choice: Optional[str] = None
    customizations: Optional[str] = None
    ad_channels: Optional[List[str]] = None
    full_website: Optional[bool] = None
    additional_contacts: Optional[List[AdditionalContact]] = None

    @field_validator("monthly_ad_budget", mode="before")
    @classmethod
    def _empty_budget_to_none(cls, v):
        if v == "" or v is None:
            return None
        return v


class OnboardingFormCreate(OnboardingFormBase):
    is_completed: bool = False


class OnboardingFormUpdate(OnboardingFormBase):
    """Partial update; completion progress is always recomputed server side"""
    is_completed: Optional[bool] = None


class OnboardingForm(OnboardingFormBase):
    id: int
    completion_progress: int
    is_completed: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("ad_channels", "additional_contacts", mode="before")
    @classmethod
    def _list_default(cls, v):
        return v if v is not None else []


class OnboardingFormWithClient(OnboardingForm):
    """Listing row; ``client`` is null for forms not yet linked to a client"""
    client: Optional[Client] = None
