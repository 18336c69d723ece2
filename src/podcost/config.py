"""Configuration management for podcost.

Loads configuration from ~/.config/podcost/config.toml.
Priority chain: env vars > config file > built-in defaults.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .optimizer.models import BudgetLimits
from .tts.models import AUDIO_FORMATS, AUDIO_QUALITIES, MAX_SPEED, MIN_SPEED, PROVIDER_NAMES

CONFIG_DIR = Path.home() / ".config" / "podcost"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# podcost configuration

[tts]
# Provider: "openai" (implemented), "google", "elevenlabs", "local" (not yet implemented)
provider = "openai"

# Default voice: alloy, echo, fable, onyx, nova, shimmer
voice = "alloy"

# Output format: mp3, wav, flac, opus
format = "mp3"

# Output quality: low, medium, high, hd
quality = "medium"

# Speaking rate (0.25-4.0)
speed = 1.0

[tts.cost_limits]
# Speech synthesis ceilings, in currency units
daily = 10.0
monthly = 100.0
per_request = 2.0

[cache]
# Reuse synthesized audio for identical requests
enabled = true

# Days before cached audio expires
expiration_days = 30

[budget]
# Summarization ceilings, in currency units
daily = 5.0
monthly = 50.0
per_request = 1.0

# API keys are read from environment variables, not this file:
#   OPENAI_API_KEY  - OpenAI provider
"""


@dataclass(frozen=True)
class CostLimits:
    """Speech synthesis spend ceilings."""

    daily: float = 10.0
    monthly: float = 100.0
    per_request: float = 2.0


@dataclass(frozen=True)
class TTSConfig:
    """Speech generation configuration."""

    provider: str = "openai"
    default_voice: str = "alloy"
    default_format: str = "mp3"
    default_quality: str = "medium"
    default_speed: float = 1.0
    enable_caching: bool = True
    cache_expiration_days: int = 30
    cost_limits: CostLimits = field(default_factory=CostLimits)

    def __post_init__(self) -> None:
        problems = validate_tts_config(self)
        if problems:
            raise ValueError("Invalid TTS configuration: " + "; ".join(problems))


@dataclass(frozen=True)
class PodcostConfig:
    """Top-level podcost configuration."""

    tts: TTSConfig = field(default_factory=TTSConfig)
    budget: BudgetLimits = field(default_factory=BudgetLimits)


def validate_tts_config(config: TTSConfig) -> list[str]:
    problems = []
    if config.provider not in PROVIDER_NAMES:
        problems.append(f"unknown provider {config.provider!r}")
    if config.default_format not in AUDIO_FORMATS:
        problems.append(f"unknown format {config.default_format!r}")
    if config.default_quality not in AUDIO_QUALITIES:
        problems.append(f"unknown quality {config.default_quality!r}")
    if not MIN_SPEED <= config.default_speed <= MAX_SPEED:
        problems.append(f"speed must be between {MIN_SPEED} and {MAX_SPEED}")
    if config.cache_expiration_days < 1:
        problems.append("cache expiration_days must be at least 1")
    limits = config.cost_limits
    if min(limits.daily, limits.monthly, limits.per_request) < 0:
        problems.append("cost limits cannot be negative")
    return problems


def generate_config(path: Path = CONFIG_PATH) -> Path:
    """Write the default config file and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(path: Path | None = None) -> PodcostConfig:
    """Load configuration from a TOML file with env var overrides.

    A missing file is not an error: built-in defaults are used and the
    environment can still override them.

    Args:
        path: Config file to read (defaults to ~/.config/podcost/config.toml)

    Returns:
        Loaded and validated PodcostConfig.

    Raises:
        ValueError: If any value is invalid. The message lists every problem.
    """
    path = path or CONFIG_PATH
    data: dict = {}
    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)

    tts = data.get("tts", {})
    limits = tts.get("cost_limits", {})
    cache = data.get("cache", {})
    budget = data.get("budget", {})
    defaults = TTSConfig()

    try:
        tts_config = TTSConfig(
            provider=os.getenv("PODCOST_PROVIDER", tts.get("provider", defaults.provider)),
            default_voice=os.getenv("PODCOST_VOICE", tts.get("voice", defaults.default_voice)),
            default_format=os.getenv(
                "PODCOST_FORMAT", tts.get("format", defaults.default_format)
            ),
            default_quality=os.getenv(
                "PODCOST_QUALITY", tts.get("quality", defaults.default_quality)
            ),
            default_speed=float(
                os.getenv("PODCOST_SPEED", tts.get("speed", defaults.default_speed))
            ),
            enable_caching=_env_bool(
                "PODCOST_CACHE_ENABLED", cache.get("enabled", defaults.enable_caching)
            ),
            cache_expiration_days=int(
                os.getenv(
                    "PODCOST_CACHE_DAYS",
                    cache.get("expiration_days", defaults.cache_expiration_days),
                )
            ),
            cost_limits=CostLimits(
                daily=float(limits.get("daily", CostLimits.daily)),
                monthly=float(limits.get("monthly", CostLimits.monthly)),
                per_request=float(limits.get("per_request", CostLimits.per_request)),
            ),
        )
        budget_limits = BudgetLimits(
            daily=float(budget.get("daily", BudgetLimits.daily)),
            monthly=float(budget.get("monthly", BudgetLimits.monthly)),
            per_request=float(budget.get("per_request", BudgetLimits.per_request)),
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e

    return PodcostConfig(tts=tts_config, budget=budget_limits)
