"""Pytest configuration and fixtures for podcost tests."""

import asyncio
import sys
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from podcost.config import TTSConfig
from podcost.providers.base import ProviderCapabilities, TTSProvider
from podcost.storage import LocalBlobStorage
from podcost.tts.engine import SpeechGenerationEngine
from podcost.tts.models import COST_PER_1K_CHARS, SynthesisOptions


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeOpenAIProvider(TTSProvider):
    """Stands in for the OpenAI provider and records every call."""

    name = "openai"
    capabilities = ProviderCapabilities(
        max_characters=4096,
        cost_per_1k_chars=COST_PER_1K_CHARS["openai"],
    )

    def __init__(self, audio: bytes = b"ID3fake-mp3-bytes") -> None:
        self.audio = audio
        self.calls: list[tuple[str, SynthesisOptions]] = []
        self.error: Exception | None = None
        self.delay = 0.0

    async def synthesize(self, text: str, options: SynthesisOptions) -> bytes:
        self.calls.append((text, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.audio

    async def list_voices(self) -> list[dict]:
        return [{"id": "alloy", "name": "Alloy", "provider": self.name}]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_provider() -> FakeOpenAIProvider:
    return FakeOpenAIProvider()


@pytest.fixture
def blob_storage(tmp_path: Path) -> LocalBlobStorage:
    return LocalBlobStorage(tmp_path / "blobs")


@pytest.fixture
def make_engine(
    blob_storage: LocalBlobStorage,
    fake_provider: FakeOpenAIProvider,
    clock: FakeClock,
) -> Callable[..., SpeechGenerationEngine]:
    """Build engines wired to the fake provider, local blobs and fake clock."""

    def _make(config: TTSConfig | None = None, **kwargs) -> SpeechGenerationEngine:
        kwargs.setdefault("providers", {"openai": fake_provider})
        kwargs.setdefault("clock", clock)
        return SpeechGenerationEngine(config, blob_storage=blob_storage, **kwargs)

    return _make
