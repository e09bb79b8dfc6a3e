"""Process-local coordinate cache with an injected TTL and clock.

One instance is constructed per process and handed to the resolver. Entries
are keyed by the normalized ``"city, state"`` string and are never persisted.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from relationship_api.lib.geocoder.address import coordinate_cache_key
from relationship_api.lib.geocoder.base import Coordinate

DEFAULT_TTL = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class CachedCoordinate:
    """A cached city/state resolution."""

    latitude: float
    longitude: float
    display_name: str | None
    cached_at: datetime

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude, self.display_name)


class CoordinateCache:
    """In-memory city/state coordinate cache.

    An entry is fresh while its age is strictly less than the TTL; expired
    entries are dropped on lookup. Writes are plain key overwrites, so no
    locking is needed on a single event loop.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Callable[[], datetime] = _utcnow) -> None:
        if ttl <= timedelta(0):
            msg = "ttl must be positive"
            raise ValueError(msg)
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedCoordinate] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _is_fresh(self, entry: CachedCoordinate, now: datetime) -> bool:
        return now - entry.cached_at < self._ttl

    def get(self, city: str, state: str) -> Coordinate | None:
        """Return the cached coordinate for a city/state, or None on miss or expiry."""
        key = coordinate_cache_key(city, state)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            del self._entries[key]
            return None
        return entry.coordinate

    def put(self, city: str, state: str, coordinate: Coordinate) -> None:
        """Store (or replace) a coordinate, stamped with the current clock time."""
        self._entries[coordinate_cache_key(city, state)] = CachedCoordinate(
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            display_name=coordinate.display_name,
            cached_at=self._clock(),
        )

    def clear_expired(self) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not self._is_fresh(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        """Summarize cache contents for diagnostics."""
        stamps = [entry.cached_at for entry in self._entries.values()]
        return {
            "size": len(self._entries),
            "ttl_days": self._ttl.total_seconds() / 86400,
            "keys": sorted(self._entries),
            "oldest_entry": min(stamps) if stamps else None,
            "newest_entry": max(stamps) if stamps else None,
        }
