from typing import Any, Optional

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..models.client import ClientStatus, ClientType

CLIENT_STATUSES = tuple(s.value for s in ClientStatus)
CLIENT_TYPES = tuple(t.value for t in ClientType)


def validate_status(value: Any, field: str = "status") -> ClientStatus:
    """Accept exactly one of the four pipeline states"""
    if isinstance(value, ClientStatus):
        return value
    if isinstance(value, str) and value in CLIENT_STATUSES:
        return ClientStatus(value)
    raise ValidationError.for_field(
        field,
        f"Status must be one of: {', '.join(CLIENT_STATUSES)}",
        value=value,
    )


def validate_client_type(value: Any) -> Optional[ClientType]:
    """Service package; empty means unset"""
    if value is None or value == "":
        return None
    if isinstance(value, str) and value in CLIENT_TYPES:
        return ClientType(value)
    raise ValidationError.for_field(
        "clientType",
        f"Client type must be one of: {', '.join(CLIENT_TYPES)}",
        value=value,
    )


def initial_status(default_status: Optional[str] = None) -> ClientStatus:
    """Status for a new client when the payload names none.

    Intake entry points disagree on this (pipeline intake uses prospect,
    client management uses active), so callers pass their own default.
    """
    if default_status is None:
        default_status = settings.DEFAULT_CLIENT_STATUS
    return validate_status(default_status, field="defaultStatus")


def apply_transition(client, status: Any) -> ClientStatus:
    """Move a client to ``status``; every transition between known states is allowed"""
    new_status = validate_status(status)
    client.status = new_status.value
    return new_status
