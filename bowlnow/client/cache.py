import logging
from typing import Any, Awaitable, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]
Fetcher = Callable[[], Awaitable[Any]]


class QueryCache:
    """In-memory cache of API collections keyed by name (``clients``, ``invoices`` ...).

    Subscribers are notified synchronously on every write, so an optimistic
    write is visible before any network call resolves.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._fetchers: Dict[str, Fetcher] = {}
        self._listeners: Dict[str, List[Listener]] = {}
        self._stale: set = set()

    def register(self, key: str, fetcher: Fetcher) -> None:
        self._fetchers[key] = fetcher

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def is_stale(self, key: str) -> bool:
        return key in self._stale

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._stale.discard(key)
        self._notify(key, value)

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Returns an unsubscribe callable"""
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    async def fetch(self, key: str) -> Any:
        fetcher = self._fetchers.get(key)
        if fetcher is None:
            raise KeyError(f"No fetcher registered for '{key}'")
        value = await fetcher()
        self.set(key, value)
        return value

    async def invalidate(self, key: str) -> None:
        """Mark ``key`` stale and refetch it when a fetcher is registered"""
        self._stale.add(key)
        if key in self._fetchers:
            await self.fetch(key)

    def _notify(self, key: str, value: Any) -> None:
        for listener in list(self._listeners.get(key, [])):
            try:
                listener(key, value)
            except Exception as e:
                logger.error(f"Cache listener for '{key}' failed: {e}")
