from typing import Optional
from datetime import datetime
from pydantic import Field

from .base import CamelModel


class ContactCreate(CamelModel):
    client_id: int
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_primary: bool = False


class ContactUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_primary: Optional[bool] = None


class Contact(ContactCreate):
    id: int
    client_id: Optional[int] = None
    created_at: datetime
