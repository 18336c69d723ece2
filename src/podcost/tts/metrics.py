"""In-memory speech generation metrics and request history."""

import copy
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from .models import AUDIO_QUALITIES, PROVIDER_NAMES, SynthesisRequest, SynthesisResult

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


@dataclass
class WindowTotals:
    """Trailing-day totals.

    Known limitation: the bucket only ever grows. Nothing prunes requests
    older than 24 hours, so after the first day it equals the lifetime
    totals of the process.
    """

    requests: int = 0
    cost: float = 0.0
    duration: float = 0.0


@dataclass
class TTSMetrics:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_cost: float = 0.0
    total_duration: float = 0.0
    total_size: int = 0
    average_processing_time: float = 0.0
    average_cost_per_minute: float = 0.0
    cache_hit_rate: float = 0.0
    cost_by_provider: dict[str, float] = field(
        default_factory=lambda: dict.fromkeys(PROVIDER_NAMES, 0.0)
    )
    usage_by_voice: dict[str, int] = field(default_factory=dict)
    quality_distribution: dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(AUDIO_QUALITIES, 0)
    )
    last_24_hours: WindowTotals = field(default_factory=WindowTotals)


@dataclass(frozen=True)
class HistoryRecord:
    id: str
    timestamp: datetime
    request: SynthesisRequest
    result: SynthesisResult | None
    success: bool
    error: str | None = None


class MetricsAggregator:
    """Rolling counters plus a bounded, FIFO request history.

    Averages are updated incrementally on each success instead of being
    recomputed from history.
    """

    def __init__(self, history_limit: int = HISTORY_LIMIT) -> None:
        self._metrics = TTSMetrics()
        self._history: deque[HistoryRecord] = deque(maxlen=history_limit)

    def record_request(self) -> None:
        self._metrics.total_requests += 1

    def record_success(self, result: SynthesisResult) -> None:
        m = self._metrics
        meta = result.metadata
        m.successful_requests += 1
        m.total_cost += meta.cost
        m.total_duration += result.duration_seconds
        m.total_size += result.size_bytes

        m.cost_by_provider[meta.provider] = m.cost_by_provider.get(meta.provider, 0.0) + meta.cost
        m.usage_by_voice[meta.voice] = m.usage_by_voice.get(meta.voice, 0) + 1
        m.quality_distribution[result.quality] = m.quality_distribution.get(result.quality, 0) + 1

        # Running mean over successful requests
        m.average_processing_time += (
            meta.processing_time_ms - m.average_processing_time
        ) / m.successful_requests
        if m.total_duration > 0:
            m.average_cost_per_minute = m.total_cost / m.total_duration * 60

        m.last_24_hours.requests += 1
        m.last_24_hours.cost += meta.cost
        m.last_24_hours.duration += result.duration_seconds

    def record_cache_hit(self) -> None:
        self._metrics.successful_requests += 1

    def record_failure(self) -> None:
        self._metrics.failed_requests += 1

    def update_cache_hit_rate(self, cache_hits: int) -> None:
        """Set hit rate from the audio cache's served-hit total."""
        if self._metrics.total_requests > 0:
            self._metrics.cache_hit_rate = cache_hits / self._metrics.total_requests

    @property
    def cost_last_24_hours(self) -> float:
        return self._metrics.last_24_hours.cost

    def add_history(
        self,
        request: SynthesisRequest,
        result: SynthesisResult | None,
        success: bool,
        error: str | None = None,
    ) -> HistoryRecord:
        record = HistoryRecord(
            id=f"tts_{uuid.uuid4().hex[:12]}",
            timestamp=datetime.now(),
            request=request,
            result=result,
            success=success,
            error=error,
        )
        self._history.append(record)
        return record

    def snapshot(self) -> TTSMetrics:
        return copy.deepcopy(self._metrics)

    def history(self) -> list[HistoryRecord]:
        return list(self._history)

    def reset(self) -> None:
        self._metrics = TTSMetrics()
        self._history.clear()
        logger.info("TTS metrics reset")
