"""Blob storage for generated audio.

The engine only needs two operations from a blob store: upload bytes under
a key and get back a URL, and delete by URL. ``LocalBlobStorage`` keeps
blobs on the filesystem and hands out ``file://`` URLs.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import unquote, urlparse

logger = logging.getLogger(__name__)

__all__ = ["BlobStorage", "LocalBlobStorage"]


class BlobStorage(ABC):
    """Abstract blob store."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its public URL."""

    @abstractmethod
    async def delete(self, url: str) -> None:
        """Delete the blob at ``url``."""


class LocalBlobStorage(BlobStorage):
    """Filesystem-backed blob store rooted at a directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Blob key escapes storage root: {key}")
        return path

    def _path_for_url(self, url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise ValueError(f"Not a local blob URL: {url}")
        path = Path(unquote(parsed.path)).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Blob URL outside storage root: {url}")
        return path

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for_key(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(path.suffix + ".tmp")
            tmp_path.write_bytes(data)
            tmp_path.replace(path)

        await asyncio.to_thread(_write)
        logger.debug(f"Stored {len(data)} bytes ({content_type}) at {path}")
        return path.as_uri()

    async def delete(self, url: str) -> None:
        path = self._path_for_url(url)
        await asyncio.to_thread(path.unlink)
        logger.debug(f"Deleted blob {path}")
