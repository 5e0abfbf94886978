"""
Optimistic status changes over the ``clients`` collection of a QueryCache.

The new status is written to the cache before the server confirms it. On
failure the record is restored from a snapshot taken just before the change.
Snapshots are per client id, so concurrent changes to different clients roll
back independently. Two in-flight changes to the same client are last writer
wins: each failure restores the record as it was when that change started.
"""
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .cache import QueryCache

logger = logging.getLogger(__name__)

Persist = Callable[[int, str], Awaitable[Any]]


class OptimisticUpdateError(Exception):
    def __init__(self, client_id: int, status: str, cause: Exception):
        self.client_id = client_id
        self.status = status
        self.cause = cause
        super().__init__(f"Could not move client {client_id} to {status}: {cause}")


class OptimisticStatusUpdater:
    def __init__(self, cache: QueryCache, persist: Persist, key: str = "clients"):
        self.cache = cache
        self.persist = persist
        self.key = key
        self.snapshots: Dict[int, Dict[str, Any]] = {}

    def _records(self) -> List[Dict[str, Any]]:
        return list(self.cache.get(self.key) or [])

    def _replace(self, client_id: int, record: Optional[Dict[str, Any]]) -> None:
        self.cache.set(
            self.key,
            [record if r.get("id") == client_id else r for r in self._records()],
        )

    async def change_status(self, client_id: int, status: str) -> Any:
        current = next((r for r in self._records() if r.get("id") == client_id), None)
        snapshot = copy.deepcopy(current) if current is not None else None
        if snapshot is not None:
            self.snapshots[client_id] = snapshot
            self._replace(client_id, {**current, "status": status})

        try:
            result = await self.persist(client_id, status)
        except Exception as e:
            if snapshot is not None:
                self._replace(client_id, copy.deepcopy(snapshot))
            if self.snapshots.get(client_id) is snapshot:
                self.snapshots.pop(client_id, None)
            logger.warning(f"Rolled back status change for client {client_id}: {e}")
            raise OptimisticUpdateError(client_id, status, e) from e

        if self.snapshots.get(client_id) is snapshot:
            self.snapshots.pop(client_id, None)
        await self.cache.invalidate(self.key)
        return result
