from typing import List, Optional
from datetime import datetime
from pydantic import Field, field_validator

from .base import CamelModel


class ClientBase(CamelModel):
    """Base client schema"""
    business_name: str = Field(..., min_length=1)
    contact_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: Optional[str] = None
    client_type: Optional[str] = None
    tags: List[str] = []
    web_slug: Optional[str] = None
    notes: Optional[str] = None
    preferred_communication: Optional[str] = "email"
    current_payment: Optional[str] = None
    proposed_payment: Optional[str] = None
    upsell_amount: Optional[str] = None

    @field_validator("business_name", "contact_name", "email")
    @classmethod
    def _strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ClientCreate(ClientBase):
    """Schema for creating a client; status falls back to the intake default"""
    status: Optional[str] = None


class ClientUpdate(CamelModel):
    """Schema for updating a client"""
    business_name: Optional[str] = Field(None, min_length=1)
    contact_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    status: Optional[str] = None
    client_type: Optional[str] = None
    tags: Optional[List[str]] = None
    web_slug: Optional[str] = None
    notes: Optional[str] = None
    preferred_communication: Optional[str] = None
    current_payment: Optional[str] = None
    proposed_payment: Optional[str] = None
    upsell_amount: Optional[str] = None


class ClientStatusUpdate(CamelModel):
    status: str


class Client(ClientBase):
    """Client schema for responses"""
    id: int
    status: str
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, v):
        return v if v is not None else []
