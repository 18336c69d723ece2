"""Content-addressed caches with TTL expiry.

``ContentAddressedCache`` maps a canonical content hash to at most one
live entry. Expired entries are evicted lazily, on the lookup that finds
them. ``AudioCache`` additionally counts accesses and deletes the blob an
entry owns when the entry goes away.
"""

import logging
import threading
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Generic, TypeVar

from .models import CacheEntry, CacheMetadata, CacheStats
from .storage import CachePersistence, InMemoryCachePersistence

if TYPE_CHECKING:
    from ..storage import BlobStorage
    from ..tts.models import AudioArtifact

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_TTL = timedelta(hours=48)
DEFAULT_AUDIO_TTL_DAYS = 30


class ContentAddressedCache(Generic[T]):
    """Generic hash → payload store with a fixed time-to-live.

    Example:
        cache = ContentAddressedCache[str](ttl=timedelta(hours=48))
        await cache.put(summary_hash(text), "summary", model="gpt-4o", cost=0.01)
        entry = await cache.get(summary_hash(text))
    """

    track_access = False

    def __init__(
        self,
        ttl: timedelta,
        persistence: CachePersistence[T] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self.persistence: CachePersistence[T] = (
            persistence if persistence is not None else InMemoryCachePersistence()
        )
        self._clock = clock
        self._lock = threading.Lock()
        self._lookups = 0
        self._hits = 0
        self._evictions = 0

    def _lookup(self, content_hash: str) -> tuple[CacheEntry[T] | None, CacheEntry[T] | None]:
        """Return ``(live_entry, evicted_entry)`` for a hash."""
        with self._lock:
            self._lookups += 1
            entry = self.persistence.load(content_hash)
            if entry is None:
                return None, None

            now = self._clock()
            if entry.is_expired(now):
                self.persistence.delete(content_hash)
                self._evictions += 1
                logger.debug(f"Evicted expired cache entry {content_hash[:12]}")
                return None, entry

            self._hits += 1
            if self.track_access:
                entry.metadata.access_count += 1
                entry.metadata.last_accessed = now
                self.persistence.save(entry)
            return entry, None

    async def _on_evict(self, entry: CacheEntry[T]) -> None:
        """Release resources owned by an entry that left the cache."""

    async def get(self, content_hash: str) -> CacheEntry[T] | None:
        """Return the live entry for ``content_hash`` or None.

        An expired entry is deleted as a side effect and reported as a miss.
        """
        entry, evicted = self._lookup(content_hash)
        if evicted is not None:
            await self._on_evict(evicted)
        return entry

    async def put(
        self,
        content_hash: str,
        payload: T,
        *,
        model: str,
        cost: float,
        quality: float | str | None = None,
    ) -> CacheEntry[T]:
        """Insert or overwrite the entry for ``content_hash``."""
        now = self._clock()
        entry = CacheEntry(
            id=uuid.uuid4().hex,
            content_hash=content_hash,
            payload=payload,
            metadata=CacheMetadata(
                model=model,
                cost=cost,
                quality=quality,
                created_at=now,
                expires_at=now + self.ttl,
                last_accessed=now,
                access_count=1,
            ),
        )
        with self._lock:
            replaced = self.persistence.load(content_hash)
            self.persistence.save(entry)
        if replaced is not None and self._owns_different_resource(replaced, entry):
            await self._on_evict(replaced)
        return entry

    def _owns_different_resource(self, old: CacheEntry[T], new: CacheEntry[T]) -> bool:
        return False

    async def delete(self, content_hash: str) -> bool:
        with self._lock:
            entry = self.persistence.load(content_hash)
            if entry is None:
                return False
            self.persistence.delete(content_hash)
        await self._on_evict(entry)
        return True

    async def clear(self) -> None:
        with self._lock:
            entries = self.persistence.entries()
            self.persistence.clear()
        for entry in entries:
            await self._on_evict(entry)

    def entries(self) -> list[CacheEntry[T]]:
        return self.persistence.entries()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self.persistence.entries()),
                lookups=self._lookups,
                hits=self._hits,
                misses=self._lookups - self._hits,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        return len(self.persistence.entries())

    def close(self) -> None:
        self.persistence.close()


class AudioCache(ContentAddressedCache["AudioArtifact"]):
    """Audio result cache.

    Tracks ``access_count`` and ``last_accessed`` on every hit and deletes
    the owned blob when an entry is evicted, deleted or cleared. Blob
    delete failures are logged and never raised.
    """

    track_access = True

    def __init__(
        self,
        blob_storage: "BlobStorage",
        expiration_days: int = DEFAULT_AUDIO_TTL_DAYS,
        persistence: CachePersistence["AudioArtifact"] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(timedelta(days=expiration_days), persistence, clock)
        self.blob_storage = blob_storage

    async def _on_evict(self, entry: CacheEntry["AudioArtifact"]) -> None:
        url = entry.payload.audio_url
        try:
            await self.blob_storage.delete(url)
            logger.debug(f"Deleted cached audio blob {url}")
        except Exception as e:
            logger.warning(f"Failed to delete blob file {url}: {e}")

    def _owns_different_resource(
        self, old: CacheEntry["AudioArtifact"], new: CacheEntry["AudioArtifact"]
    ) -> bool:
        return old.payload.audio_url != new.payload.audio_url

    def total_hits(self) -> int:
        """Hits served across live entries: Σ(access_count − 1)."""
        return sum(e.metadata.access_count - 1 for e in self.entries())

    def total_size(self) -> int:
        return sum(e.payload.size_bytes for e in self.entries())
