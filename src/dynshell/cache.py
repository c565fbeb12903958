"""Process-lifetime cache keyed by string."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheStats:
    """Statistics for cache usage."""

    hits: int = 0
    misses: int = 0
    size: int = 0

    def as_dict(self) -> dict[str, int]:
        """Return stats as a dictionary."""
        return {"hits": self.hits, "misses": self.misses, "size": self.size}


@dataclass
class ProcessCache:
    """
    In-memory cache that lives as long as the process.

    Entries never expire. The shell runs one command at a time, so no
    locking is done.
    """

    _entries: dict[str, Any] = field(init=False, default_factory=dict)
    _hits: int = field(init=False, default=0)
    _misses: int = field(init=False, default=0)

    def get(self, key: str) -> Any:
        """Return the cached value, or None on a miss."""
        if key in self._entries:
            self._hits += 1
            return self._entries[key]
        self._misses += 1
        return None

    def set(self, key: str, value: Any) -> Any:
        """Store and return ``value``."""
        self._entries[key] = value
        return value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def get_stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, size=len(self._entries))


# Shared by the table registry for the process lifetime
cache = ProcessCache()
