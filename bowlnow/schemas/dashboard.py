from pydantic import Field

from .base import CamelModel


class DashboardMetrics(CamelModel):
    total_clients: int = 0
    active_clients: int = 0
    prospects: int = 0
    overdue: int = 0
    total_mrr: float = Field(0, alias="totalMRR")


class StripeSyncResult(CamelModel):
    message: str
    synced: int = 0
    imported: int = 0


class WebhookAck(CamelModel):
    received: bool = True
    event_type: str = ""
    handled: bool = False
