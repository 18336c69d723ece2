"""Test package structure and imports."""

import sys
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that podcost package can be imported."""
    import podcost

    assert podcost.__version__ == "0.1.0"


def test_lazy_top_level_exports() -> None:
    """Test the main entry points resolve through the package."""
    import podcost
    from podcost.optimizer import CostOptimizer
    from podcost.tts.engine import SpeechGenerationEngine

    assert podcost.CostOptimizer is CostOptimizer
    assert podcost.SpeechGenerationEngine is SpeechGenerationEngine


def test_tts_package_exposes_engine() -> None:
    """Test the engine is reachable from podcost.tts."""
    import podcost.tts
    from podcost.tts.engine import SpeechGenerationEngine

    assert podcost.tts.SpeechGenerationEngine is SpeechGenerationEngine


def test_unknown_attribute_raises() -> None:
    """Test missing attributes raise AttributeError."""
    import podcost

    with pytest.raises(AttributeError):
        podcost.DoesNotExist  # noqa: B018
