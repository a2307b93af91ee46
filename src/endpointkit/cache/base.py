"""Abstract interface shared by the TTL cache backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class BaseCache(ABC):
    """Key/value store whose entries expire after a fixed time-to-live.

    Implementations must never return a value older than :attr:`ttl_seconds`
    and must be safe to call from concurrent requests.
    """

    ttl_seconds: float

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the live value for *key*, or ``None`` if absent or expired."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Insert or overwrite *key*, resetting its timestamp to now."""
        ...

    @abstractmethod
    def invalidate(self, key: str) -> None:
        """Remove *key* if present."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry."""
        ...

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        """Return backend statistics (at least ``size`` and ``ttl_seconds``)."""
        ...

    def close(self) -> None:
        """Release backend resources.  The default does nothing."""
