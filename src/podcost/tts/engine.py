"""Speech generation engine for podcost.

Coordinates request validation, cost ceilings, the audio cache, TTS
providers, blob storage and metrics into one ``generate_audio`` call.
"""

import asyncio
import dataclasses
import logging
import math
import time
from collections.abc import Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from ..cache.keys import audio_hash
from ..cache.models import CacheEntry
from ..cache.storage import CachePersistence
from ..cache.store import AudioCache
from ..config import TTSConfig
from ..providers import ProviderRegistry
from ..providers.base import TTSProvider
from ..storage import BlobStorage
from .errors import (
    TTSAPIError,
    TTSCostLimitError,
    TTSError,
    TTSInvalidInputError,
    TTSStorageError,
)
from .metrics import HistoryRecord, MetricsAggregator, TTSMetrics
from .models import (
    AUDIO_FORMAT_SPECS,
    AUDIO_QUALITIES,
    MAX_SPEED,
    MIN_SPEED,
    SUPPORTED_VOICES,
    AudioArtifact,
    ResultMetadata,
    SynthesisOptions,
    SynthesisRequest,
    SynthesisResult,
    VoiceInfo,
    find_voice,
)

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 155
TEST_PHRASE = (
    "This is a test of the text-to-speech system. If you can hear this, "
    "the configuration is working correctly."
)


@dataclass
class _Flight:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    waiters: int = 0


@dataclass(frozen=True)
class CacheReport:
    entries: list[CacheEntry[AudioArtifact]]
    size: int
    total_size: int


def estimate_duration(text: str, speed: float) -> int:
    """Spoken duration in whole seconds at 155 words per minute."""
    minutes = len(text.split()) / WORDS_PER_MINUTE / speed
    return math.ceil(minutes * 60)


class SpeechGenerationEngine:
    """Turns synthesis requests into stored audio, paying only when needed.

    Every engine owns its cache, metrics and provider instances, so
    several engines can coexist in one process. Identical requests that
    arrive concurrently are serialized per content hash, so only the
    first one reaches the provider. A request that passes the cost check
    reserves its estimate against the daily ceiling until it finishes, so
    concurrent requests cannot overshoot the ceiling together.

    Example:
        engine = SpeechGenerationEngine(
            TTSConfig(provider="openai"),
            blob_storage=LocalBlobStorage(Path("~/.cache/podcost/audio").expanduser()),
        )
        result = await engine.generate_audio(
            SynthesisRequest(text="Welcome to today's episode.", voice="nova")
        )
        # result.audio_url -> "file:///.../tts/<hash>.mp3"
        # result.metadata.cache_hit -> False on first call, True after
        await engine.close()
    """

    def __init__(
        self,
        config: TTSConfig | None = None,
        *,
        blob_storage: BlobStorage,
        providers: Mapping[str, TTSProvider] | None = None,
        persistence: CachePersistence[AudioArtifact] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Engine configuration (defaults to TTSConfig())
            blob_storage: Where synthesized audio is uploaded
            providers: Pre-built provider instances by name; any provider
                not given here is created from ProviderRegistry on first use
            persistence: Backend for the audio cache (in-memory if None)
            clock: Time source for cache expiry
        """
        self.config = config or TTSConfig()
        self.blob_storage = blob_storage
        self.cache = AudioCache(
            blob_storage,
            expiration_days=self.config.cache_expiration_days,
            persistence=persistence,
            clock=clock,
        )
        self.metrics = MetricsAggregator()
        self._injected_providers = dict(providers or {})
        self._providers: dict[str, TTSProvider] = dict(self._injected_providers)
        self._inflight: dict[str, _Flight] = {}
        self._reserved_cost = 0.0
        self._closed = False

        logger.debug(
            f"SpeechGenerationEngine initialized with provider={self.config.provider}, "
            f"caching={'on' if self.config.enable_caching else 'off'}"
        )

    # === PUBLIC API ===

    async def generate_audio(self, request: SynthesisRequest) -> SynthesisResult:
        """Generate (or reuse) audio for a synthesis request.

        Args:
            request: The synthesis request

        Returns:
            SynthesisResult describing the stored audio

        Raises:
            TTSInvalidInputError: If the request is malformed (no side effects)
            TTSCostLimitError: If a cost ceiling would be breached (no side effects)
            TTSError: For any provider or storage failure
        """
        if self._closed:
            raise RuntimeError("SpeechGenerationEngine is closed")

        start = time.perf_counter()
        options, provider_name = self._resolve(request)
        self._validate(request, options, provider_name)
        estimated = self._check_cost_limits(request, provider_name)
        self._reserved_cost += estimated
        try:
            return await self._generate(request, options, provider_name, start)
        finally:
            self._reserved_cost -= estimated

    async def _generate(
        self,
        request: SynthesisRequest,
        options: SynthesisOptions,
        provider_name: str,
        start: float,
    ) -> SynthesisResult:
        self.metrics.record_request()
        content_hash = audio_hash(
            {
                "text": request.text,
                "voice": options.voice,
                "provider": provider_name,
                "format": options.format,
                "quality": options.quality,
                "speed": options.speed,
                "pitch": options.pitch,
            }
        )

        try:
            async with self._single_flight(content_hash):
                if self.config.enable_caching:
                    cached = await self._check_cache(content_hash)
                    if cached is not None:
                        return cached

                result = await self._synthesize_and_store(
                    request, options, provider_name, content_hash, start
                )
        except TTSError as e:
            self._record_failure(request, e)
            raise
        except Exception as e:
            error = TTSAPIError(
                f"TTS generation failed: {e}", provider_name, False, original_error=e
            )
            self._record_failure(request, error)
            raise error from e

        self.metrics.record_success(result)
        self.metrics.update_cache_hit_rate(self.cache.total_hits())
        self.metrics.add_history(request, result, True)
        logger.info(
            f"Generated {result.duration_seconds}s of audio with {provider_name} "
            f"(cost {result.metadata.cost:.4f}, {result.metadata.processing_time_ms:.0f}ms)"
        )
        return result

    def get_metrics(self) -> TTSMetrics:
        return self.metrics.snapshot()

    def get_history(self) -> list[HistoryRecord]:
        return self.metrics.history()

    def get_config(self) -> TTSConfig:
        return self.config

    def get_supported_voices(self) -> list[VoiceInfo]:
        """Available voices whose provider has a working implementation."""
        return [
            voice
            for voice in SUPPORTED_VOICES
            if voice.is_available and self._is_implemented(voice.provider)
        ]

    def get_cache_stats(self) -> CacheReport:
        entries = sorted(
            self.cache.entries(),
            key=lambda e: e.metadata.last_accessed,
            reverse=True,
        )
        return CacheReport(
            entries=entries,
            size=len(entries),
            total_size=sum(e.payload.size_bytes for e in entries),
        )

    async def clear_cache(self) -> None:
        """Drop every cached entry and delete its audio blob."""
        await self.cache.clear()
        logger.info("Audio cache cleared")

    def update_config(self, **changes: Any) -> TTSConfig:
        """Replace configuration fields and rebuild registry-created providers.

        Raises:
            ValueError: If the resulting configuration is invalid
        """
        self.config = dataclasses.replace(self.config, **changes)
        self.cache.ttl = timedelta(days=self.config.cache_expiration_days)
        self._providers = dict(self._injected_providers)
        return self.config

    async def check_configuration(self) -> tuple[bool, str | None]:
        """Synthesize a short test phrase end to end.

        The test audio is deleted afterwards. Returns ``(success, error)``.
        """
        request = SynthesisRequest(
            text=TEST_PHRASE,
            voice=self.config.default_voice,
            provider=self.config.provider,
            format="mp3",
            quality="medium",
        )
        try:
            result = await self.generate_audio(request)
            if not await self.cache.delete(result.metadata.content_hash):
                await self._delete_blob(result.audio_url)
        except TTSError as e:
            return False, str(e)
        return True, None

    async def close(self) -> None:
        """Release the cache backend and drop provider instances.

        Cached blobs are left in place; call ``clear_cache`` first to
        delete them. Requests already dispatched run to completion.
        """
        self.cache.close()
        self._providers.clear()
        self._closed = True

    async def __aenter__(self) -> "SpeechGenerationEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # === PREFLIGHT ===

    def _resolve(self, request: SynthesisRequest) -> tuple[SynthesisOptions, str]:
        cfg = self.config
        options = SynthesisOptions(
            voice=request.voice or cfg.default_voice,
            format=request.format or cfg.default_format,
            quality=request.quality or cfg.default_quality,
            speed=float(request.speed if request.speed is not None else cfg.default_speed),
            pitch=float(request.pitch or 0.0),
        )
        return options, request.provider or cfg.provider

    def _validate(
        self, request: SynthesisRequest, options: SynthesisOptions, provider_name: str
    ) -> None:
        if not request.text or not request.text.strip():
            raise TTSInvalidInputError("Text is required")

        try:
            provider_class = ProviderRegistry.get(provider_name)
        except KeyError:
            raise TTSInvalidInputError(
                f"Unsupported TTS provider: {provider_name}", provider_name
            ) from None

        max_chars = provider_class.capabilities.max_characters
        if len(request.text) > max_chars:
            raise TTSInvalidInputError(
                f"Text too long (max {max_chars:,} characters for {provider_name})",
                provider_name,
            )

        if not MIN_SPEED <= options.speed <= MAX_SPEED:
            raise TTSInvalidInputError(
                f"Speed must be between {MIN_SPEED} and {MAX_SPEED}", provider_name
            )

        voice = find_voice(options.voice)
        if voice is None or not voice.is_available:
            raise TTSInvalidInputError(
                f"Voice {options.voice} is not available", provider_name
            )

        if (
            options.format not in AUDIO_FORMAT_SPECS
            or options.format not in provider_class.capabilities.formats
        ):
            raise TTSInvalidInputError(f"Unsupported format: {options.format}", provider_name)
        if options.quality not in AUDIO_QUALITIES:
            raise TTSInvalidInputError(f"Unsupported quality: {options.quality}", provider_name)

    def _is_implemented(self, provider_name: str) -> bool:
        try:
            return ProviderRegistry.get(provider_name).capabilities.implemented
        except KeyError:
            return False

    def _estimate_cost(self, text: str, provider_name: str) -> float:
        return ProviderRegistry.get(provider_name).capabilities.cost_for(text)

    def _check_cost_limits(self, request: SynthesisRequest, provider_name: str) -> float:
        limits = self.config.cost_limits
        estimated = self._estimate_cost(request.text, provider_name)

        if estimated > limits.per_request:
            raise TTSCostLimitError(
                f"Request cost (${estimated:.4f}) exceeds per-request limit "
                f"(${limits.per_request})",
                provider_name,
            )

        committed = self.metrics.cost_last_24_hours + self._reserved_cost
        if committed + estimated > limits.daily:
            raise TTSCostLimitError("Daily cost limit exceeded", provider_name)
        return estimated

    # === CACHE ===

    @asynccontextmanager
    async def _single_flight(self, content_hash: str):
        flight = self._inflight.get(content_hash)
        if flight is None:
            flight = self._inflight[content_hash] = _Flight()
        flight.waiters += 1
        try:
            async with flight.lock:
                yield
        finally:
            flight.waiters -= 1
            if flight.waiters == 0:
                self._inflight.pop(content_hash, None)

    async def _check_cache(self, content_hash: str) -> SynthesisResult | None:
        entry = await self.cache.get(content_hash)
        if entry is None:
            logger.debug(f"Audio cache miss for {content_hash[:12]}")
            return None

        artifact = entry.payload
        logger.debug(
            f"Audio cache hit for {content_hash[:12]} "
            f"(access count {entry.metadata.access_count})"
        )
        self.metrics.record_cache_hit()
        self.metrics.update_cache_hit_rate(self.cache.total_hits())
        return SynthesisResult(
            audio_url=artifact.audio_url,
            size_bytes=artifact.size_bytes,
            duration_seconds=artifact.duration_seconds,
            format=artifact.format,
            quality=artifact.quality,
            metadata=ResultMetadata(
                voice=artifact.voice,
                provider=artifact.provider,
                cost=0.0,
                processing_time_ms=0.0,
                content_hash=content_hash,
                cache_hit=True,
            ),
        )

    # === SYNTHESIS ===

    def _get_provider(self, name: str) -> TTSProvider:
        if name not in self._providers:
            self._providers[name] = ProviderRegistry.create(name)
            logger.debug(f"Created {name} provider on demand")
        return self._providers[name]

    async def _synthesize_and_store(
        self,
        request: SynthesisRequest,
        options: SynthesisOptions,
        provider_name: str,
        content_hash: str,
        start: float,
    ) -> SynthesisResult:
        provider = self._get_provider(provider_name)
        logger.debug(f"Calling {provider_name} TTS API for synthesis")
        audio = await provider.synthesize(request.text, options)

        audio_url = await self._upload(audio, content_hash, options.format)

        cost = self._estimate_cost(request.text, provider_name)
        duration = estimate_duration(request.text, options.speed)
        result = SynthesisResult(
            audio_url=audio_url,
            size_bytes=len(audio),
            duration_seconds=duration,
            format=options.format,
            quality=options.quality,
            metadata=ResultMetadata(
                voice=options.voice,
                provider=provider_name,
                cost=cost,
                processing_time_ms=(time.perf_counter() - start) * 1000,
                content_hash=content_hash,
                cache_hit=False,
            ),
        )

        if self.config.enable_caching:
            await self.cache.put(
                content_hash,
                AudioArtifact(
                    audio_url=audio_url,
                    size_bytes=len(audio),
                    duration_seconds=duration,
                    format=options.format,
                    quality=options.quality,
                    voice=options.voice,
                    provider=provider_name,
                ),
                model=provider_name,
                cost=cost,
                quality=options.quality,
            )
        return result

    async def _upload(self, audio: bytes, content_hash: str, fmt: str) -> str:
        spec = AUDIO_FORMAT_SPECS[fmt]
        key = f"tts/{content_hash}.{spec.extension}"
        try:
            return await self.blob_storage.put(key, audio, spec.mime_type)
        except Exception as e:
            raise TTSStorageError(
                f"Failed to upload audio file: {e}", original_error=e
            ) from e

    def _record_failure(self, request: SynthesisRequest, error: TTSError) -> None:
        self.metrics.record_failure()
        self.metrics.add_history(request, None, False, str(error))
        logger.error(f"TTS generation failed ({error.code.value}): {error}")

    async def _delete_blob(self, url: str) -> None:
        try:
            await self.blob_storage.delete(url)
        except Exception as e:
            logger.warning(f"Failed to delete blob file {url}: {e}")
