"""podcost - cost-aware summarization planning and speech generation."""

__version__ = "0.1.0"
__all__ = ["CostOptimizer", "SpeechGenerationEngine"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "CostOptimizer":
        from .optimizer import CostOptimizer

        return CostOptimizer
    if name == "SpeechGenerationEngine":
        from .tts.engine import SpeechGenerationEngine

        return SpeechGenerationEngine
    raise AttributeError(f"module 'podcost' has no attribute {name!r}")
