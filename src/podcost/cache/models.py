"""Data models for cache storage."""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheMetadata:
    """Bookkeeping attached to every cached payload.

    Attributes:
        model: Model or provider that produced the payload
        cost: Cost paid to produce the payload
        quality: Quality score or tier, if known
        created_at: When the entry was written
        expires_at: When the entry stops being served
        last_accessed: Last time the entry was written or served
        access_count: 1 on insert, incremented on every tracked hit
    """

    model: str
    cost: float
    quality: float | str | None
    created_at: datetime
    expires_at: datetime
    last_accessed: datetime
    access_count: int = 1


@dataclass
class CacheEntry(Generic[T]):
    """Cached payload keyed by a canonical content hash."""

    id: str
    content_hash: str
    payload: T
    metadata: CacheMetadata

    def is_expired(self, now: datetime) -> bool:
        return now > self.metadata.expires_at


@dataclass(frozen=True)
class CacheStats:
    entries: int
    lookups: int
    hits: int
    misses: int
    evictions: int

    @property
    def hit_rate(self) -> float:
        return self.hits / self.lookups if self.lookups else 0.0
