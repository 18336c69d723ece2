"""Content-addressed caching for podcost."""

from .keys import audio_hash, summary_hash
from .models import CacheEntry, CacheMetadata, CacheStats
from .storage import CachePersistence, InMemoryCachePersistence, SQLiteCachePersistence
from .store import AudioCache, ContentAddressedCache

__all__ = [
    "AudioCache",
    "CacheEntry",
    "CacheMetadata",
    "CachePersistence",
    "CacheStats",
    "ContentAddressedCache",
    "InMemoryCachePersistence",
    "SQLiteCachePersistence",
    "audio_hash",
    "summary_hash",
]
