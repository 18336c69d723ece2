"""TTS data models and static lookup tables."""

from dataclasses import dataclass, field
from typing import Any, Literal

AudioFormat = Literal["mp3", "wav", "flac", "opus"]
AudioQuality = Literal["low", "medium", "high", "hd"]

PROVIDER_NAMES = ("openai", "google", "elevenlabs", "local")
AUDIO_FORMATS = ("mp3", "wav", "flac", "opus")
AUDIO_QUALITIES = ("low", "medium", "high", "hd")

MIN_SPEED = 0.25
MAX_SPEED = 4.0

# Currency units per 1000 characters
COST_PER_1K_CHARS: dict[str, float] = {
    "openai": 0.015,
    "google": 0.016,
    "elevenlabs": 0.3,
    "local": 0.0,
}


@dataclass(frozen=True)
class FormatSpec:
    extension: str
    mime_type: str


AUDIO_FORMAT_SPECS: dict[str, FormatSpec] = {
    "mp3": FormatSpec("mp3", "audio/mpeg"),
    "wav": FormatSpec("wav", "audio/wav"),
    "flac": FormatSpec("flac", "audio/flac"),
    "opus": FormatSpec("opus", "audio/opus"),
}


@dataclass(frozen=True)
class VoiceInfo:
    """Information about a supported voice.

    Args:
        voice_id: Unique identifier for the voice
        display_name: Human-readable name of the voice
        provider: Provider that serves the voice
        gender: "female", "male" or "neutral"
        accent: Accent description
        description: Short voice description
        quality_rating: Subjective rating from 1 to 5
        cost_multiplier: Multiplier applied to the provider rate
        is_available: Whether requests may use the voice
    """

    voice_id: str
    display_name: str
    provider: str
    gender: str
    accent: str
    description: str
    quality_rating: int = 4
    cost_multiplier: float = 1.0
    is_available: bool = True

    def __post_init__(self) -> None:
        """Validate voice information."""
        if not self.voice_id or not self.voice_id.strip():
            raise ValueError("voice_id cannot be empty")
        if not 1 <= self.quality_rating <= 5:
            raise ValueError("quality_rating must be between 1 and 5")


SUPPORTED_VOICES: tuple[VoiceInfo, ...] = (
    VoiceInfo(
        "alloy", "Alloy", "openai", "neutral", "American",
        "Balanced, clear voice suitable for professional content",
    ),
    VoiceInfo(
        "echo", "Echo", "openai", "male", "American",
        "Deep, authoritative voice perfect for news content",
    ),
    VoiceInfo(
        "fable", "Fable", "openai", "male", "British",
        "Sophisticated, storytelling voice",
    ),
    VoiceInfo(
        "onyx", "Onyx", "openai", "male", "American",
        "Strong, confident voice for tech content",
    ),
    VoiceInfo(
        "nova", "Nova", "openai", "female", "American",
        "Energetic, engaging voice for dynamic content",
    ),
    VoiceInfo(
        "shimmer", "Shimmer", "openai", "female", "American",
        "Warm, friendly voice for conversational content",
    ),
)


def find_voice(voice_id: str) -> VoiceInfo | None:
    for voice in SUPPORTED_VOICES:
        if voice.voice_id == voice_id:
            return voice
    return None


@dataclass
class SynthesisRequest:
    """A single speech synthesis request.

    Fields left as None are filled from the engine configuration.

    Args:
        text: Text to convert to speech
        voice: Voice identifier
        provider: Provider name ("openai", "google", "elevenlabs", "local")
        format: Output audio format
        quality: Output quality tier
        speed: Speaking rate (0.25-4.0)
        pitch: Pitch shift in semitones (-20 to 20)
        volume: Output volume (0.0-1.0)
        metadata: Free-form caller data (episode id, title, source)
    """

    text: str
    voice: str | None = None
    provider: str | None = None
    format: str | None = None
    quality: str | None = None
    speed: float | None = None
    pitch: float | None = None
    volume: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SynthesisOptions:
    """Fully resolved options handed to a provider."""

    voice: str
    format: str
    quality: str
    speed: float
    pitch: float = 0.0


@dataclass(frozen=True)
class ResultMetadata:
    voice: str
    provider: str
    cost: float
    processing_time_ms: float
    content_hash: str
    cache_hit: bool


@dataclass(frozen=True)
class SynthesisResult:
    """Descriptor of generated (or reused) audio."""

    audio_url: str
    size_bytes: int
    duration_seconds: int
    format: str
    quality: str
    metadata: ResultMetadata


@dataclass(frozen=True)
class AudioArtifact:
    """Audio cache payload; owns the blob at ``audio_url``."""

    audio_url: str
    size_bytes: int
    duration_seconds: int
    format: str
    quality: str
    voice: str
    provider: str
