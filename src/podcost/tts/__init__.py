"""Speech synthesis package for podcost.

Request/result models, the error taxonomy, metrics, and the
``SpeechGenerationEngine`` (imported lazily because it depends on
``podcost.config``, which itself imports the models here).
"""

from .errors import (
    ErrorCode,
    TTSAPIError,
    TTSAuthError,
    TTSCostLimitError,
    TTSError,
    TTSInvalidInputError,
    TTSNotImplementedError,
    TTSQuotaError,
    TTSRateLimitError,
    TTSStorageError,
)
from .metrics import HistoryRecord, MetricsAggregator, TTSMetrics
from .models import (
    SUPPORTED_VOICES,
    AudioArtifact,
    SynthesisOptions,
    SynthesisRequest,
    SynthesisResult,
    VoiceInfo,
)

__all__ = [
    "SUPPORTED_VOICES",
    "AudioArtifact",
    "ErrorCode",
    "HistoryRecord",
    "MetricsAggregator",
    "SpeechGenerationEngine",
    "SynthesisOptions",
    "SynthesisRequest",
    "SynthesisResult",
    "TTSAPIError",
    "TTSAuthError",
    "TTSCostLimitError",
    "TTSError",
    "TTSInvalidInputError",
    "TTSMetrics",
    "TTSNotImplementedError",
    "TTSQuotaError",
    "TTSRateLimitError",
    "TTSStorageError",
    "VoiceInfo",
]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "SpeechGenerationEngine":
        from .engine import SpeechGenerationEngine

        return SpeechGenerationEngine
    raise AttributeError(f"module 'podcost.tts' has no attribute {name!r}")
