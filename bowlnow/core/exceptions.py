from typing import Any, Dict, List, Optional


class BowlNowError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.message
        self.errors = errors or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(BowlNowError):
    """Payload failed validation; the caller can correct it and retry"""

    status_code = 400
    message = "Validation error"

    @classmethod
    def for_field(cls, field: str, detail: str, value: Any = None) -> "ValidationError":
        error: Dict[str, Any] = {"field": field, "message": detail}
        if value is not None:
            error["value"] = value
        return cls(errors=[error])


class NotFoundError(BowlNowError):
    status_code = 404
    message = "Not found"

    def __init__(self, entity: str, entity_id: Any = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class PersistenceError(BowlNowError):
    """The underlying store rejected or failed an operation"""

    status_code = 500
    message = "Persistence error"
