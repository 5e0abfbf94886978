"""
Debounced persistence of in-progress form state.

Every ``update`` restarts the quiet period; when it expires the latest state
is saved once, unless it serializes identically to the last successful save.
Failures are logged and handed to ``on_error``; they are not retried, and the
next edit schedules a fresh attempt with whatever state is current then.
"""
import asyncio
import copy
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..core.config import settings

logger = logging.getLogger(__name__)


def _serialize(state: Dict[str, Any]) -> str:
    return json.dumps(state, sort_keys=True, default=str)


class AutoSaveCoordinator:
    def __init__(
        self,
        save: Callable[[Dict[str, Any]], Awaitable[Any]],
        quiet_period: Optional[float] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._save = save
        self.quiet_period = quiet_period if quiet_period is not None else settings.AUTO_SAVE_DEBOUNCE_MS / 1000
        self._on_error = on_error
        self._sleep = sleep
        self.enabled = True
        self._state: Optional[Dict[str, Any]] = None
        self._last_saved: Optional[str] = None
        self._timer: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def mark_saved(self, state: Dict[str, Any]) -> None:
        """Record ``state`` as already persisted (e.g. loaded from the server)"""
        self._last_saved = _serialize(state)

    def update(self, state: Dict[str, Any]) -> None:
        if self._closed:
            return
        self._state = copy.deepcopy(state)
        self._cancel_timer()
        if not self.enabled:
            return
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_save())

    async def _wait_then_save(self) -> None:
        await self._sleep(self.quiet_period)
        # Past this point a new edit starts a new timer instead of cancelling this save
        self._timer = None
        await self._save_latest()

    async def _save_latest(self) -> bool:
        if self._state is None:
            return False
        state = self._state
        serialized = _serialize(state)
        if serialized == self._last_saved:
            return False
        try:
            await self._save(state)
        except Exception as e:
            logger.warning(f"Auto-save failed: {e}")
            if self._on_error is not None:
                self._on_error(e)
            return False
        self._last_saved = serialized
        return True

    async def flush(self) -> bool:
        """Save now if a save is pending; returns True when a save happened"""
        if not self.pending or self._closed:
            return False
        self._cancel_timer()
        return await self._save_latest()

    def close(self) -> None:
        self._closed = True
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
