"""Unit tests for configuration loading."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from podcost.config import (
    CostLimits,
    PodcostConfig,
    TTSConfig,
    generate_config,
    load_config,
)
from podcost.optimizer.models import BudgetLimits

ENV_VARS = (
    "PODCOST_PROVIDER",
    "PODCOST_VOICE",
    "PODCOST_FORMAT",
    "PODCOST_QUALITY",
    "PODCOST_SPEED",
    "PODCOST_CACHE_ENABLED",
    "PODCOST_CACHE_DAYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test built-in defaults."""

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        """Test a nonexistent config file is not an error."""
        config = load_config(tmp_path / "missing.toml")

        assert config == PodcostConfig()
        assert config.tts.provider == "openai"
        assert config.tts.default_voice == "alloy"
        assert config.tts.default_format == "mp3"
        assert config.tts.default_quality == "medium"
        assert config.tts.default_speed == 1.0
        assert config.tts.enable_caching is True
        assert config.tts.cache_expiration_days == 30
        assert config.tts.cost_limits == CostLimits(daily=10.0, monthly=100.0, per_request=2.0)
        assert config.budget == BudgetLimits(daily=5.0, monthly=50.0, per_request=1.0)

    def test_generated_file_loads_to_defaults(self, tmp_path: Path) -> None:
        """Test the generated default file round-trips to defaults."""
        path = generate_config(tmp_path / "podcost" / "config.toml")

        assert path.exists()
        assert load_config(path) == PodcostConfig()


class TestLoadFromFile:
    """Test TOML loading."""

    def test_values_from_file(self, tmp_path: Path) -> None:
        """Test every section is read from the file."""
        path = tmp_path / "config.toml"
        path.write_text(
            """
[tts]
provider = "openai"
voice = "nova"
format = "opus"
quality = "hd"
speed = 1.25

[tts.cost_limits]
daily = 3.0
monthly = 30.0
per_request = 0.5

[cache]
enabled = false
expiration_days = 7

[budget]
daily = 1.0
monthly = 10.0
per_request = 0.2
"""
        )

        config = load_config(path)

        assert config.tts == TTSConfig(
            provider="openai",
            default_voice="nova",
            default_format="opus",
            default_quality="hd",
            default_speed=1.25,
            enable_caching=False,
            cache_expiration_days=7,
            cost_limits=CostLimits(daily=3.0, monthly=30.0, per_request=0.5),
        )
        assert config.budget == BudgetLimits(daily=1.0, monthly=10.0, per_request=0.2)

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        """Test environment variables win over file values."""
        path = tmp_path / "config.toml"
        path.write_text('[tts]\nvoice = "nova"\n[cache]\nenabled = true\n')
        monkeypatch.setenv("PODCOST_VOICE", "echo")
        monkeypatch.setenv("PODCOST_SPEED", "2.0")
        monkeypatch.setenv("PODCOST_CACHE_ENABLED", "false")
        monkeypatch.setenv("PODCOST_CACHE_DAYS", "3")

        config = load_config(path)

        assert config.tts.default_voice == "echo"
        assert config.tts.default_speed == 2.0
        assert config.tts.enable_caching is False
        assert config.tts.cache_expiration_days == 3

    def test_invalid_values_are_all_reported(self, tmp_path: Path) -> None:
        """Test one error lists every invalid field."""
        path = tmp_path / "config.toml"
        path.write_text('[tts]\nprovider = "azure"\nformat = "aac"\nspeed = 9.0\n')

        with pytest.raises(ValueError, match="Invalid config in") as exc_info:
            load_config(path)

        message = str(exc_info.value)
        assert "unknown provider 'azure'" in message
        assert "unknown format 'aac'" in message
        assert "speed must be between" in message

    def test_non_numeric_env_is_value_error(self, tmp_path: Path, monkeypatch) -> None:
        """Test unparsable overrides surface as ValueError."""
        monkeypatch.setenv("PODCOST_SPEED", "fast")

        with pytest.raises(ValueError, match="Invalid config in"):
            load_config(tmp_path / "missing.toml")

    def test_negative_budget_rejected(self, tmp_path: Path) -> None:
        """Test negative summarization limits are rejected."""
        path = tmp_path / "config.toml"
        path.write_text("[budget]\ndaily = -1.0\n")

        with pytest.raises(ValueError, match="daily budget cannot be negative"):
            load_config(path)


class TestTTSConfigValidation:
    """Test direct TTSConfig construction."""

    def test_zero_expiration_rejected(self) -> None:
        with pytest.raises(ValueError, match="expiration_days"):
            TTSConfig(cache_expiration_days=0)

    def test_negative_cost_limit_rejected(self) -> None:
        with pytest.raises(ValueError, match="cost limits cannot be negative"):
            TTSConfig(cost_limits=CostLimits(daily=-1.0))
