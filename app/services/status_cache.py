import time
from abc import ABC, abstractmethod
from typing import Callable

from app.schemas.status import CachedStatus

DEFAULT_TTL = 30


class StatusCache(ABC):
    @abstractmethod
    async def get(self, key: str) -> CachedStatus | None:
        """Return the cached status for *key*, or None when absent or expired."""
        pass

    @abstractmethod
    async def put(self, key: str, value: CachedStatus, ttl_seconds: int = DEFAULT_TTL) -> None:
        """Store *value* under *key*, replacing any previous entry, for *ttl_seconds*."""
        pass


class InMemoryStatusCache(StatusCache):
    """Process-local cache. Entries expire on their own; nothing invalidates them early."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.entries: dict[str, tuple[CachedStatus, float]] = {}

    async def get(self, key: str) -> CachedStatus | None:
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            self.entries.pop(key, None)
            return None
        return value

    async def put(self, key: str, value: CachedStatus, ttl_seconds: int = DEFAULT_TTL) -> None:
        self.entries[key] = (value, self.clock() + ttl_seconds)
