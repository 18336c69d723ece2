"""Heuristic content complexity scoring.

Scores text on four factors and maps the weighted result to a model
tier. Pure and deterministic: no I/O, no state.
"""

import math
import re

from .models import (
    CHEAP_MODEL,
    MID_MODEL,
    PREMIUM_MODEL,
    ComplexityAnalysis,
    ComplexityFactors,
)

TECHNICAL_TERMS = (
    "algorithm",
    "ai",
    "machine learning",
    "blockchain",
    "cryptocurrency",
    "quantum",
    "neural network",
    "api",
    "database",
    "server",
    "protocol",
    "framework",
    "architecture",
    "infrastructure",
    "scalability",
    "optimization",
)

REASONING_CUES = re.compile(
    r"\b(?:why|how|what if|because|therefore|however|meanwhile)\b",
    re.IGNORECASE,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")

WEIGHTS = ComplexityFactors(
    technical_terms=3,
    sentence_complexity=2,
    topic_depth=2,
    required_reasoning=3,
)

CHEAP_MAX_SCORE = 4
MID_MAX_SCORE = 7


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return max(low, min(value, high))


def tier_for_score(score: int) -> str:
    if score <= CHEAP_MAX_SCORE:
        return CHEAP_MODEL
    if score <= MID_MAX_SCORE:
        return MID_MODEL
    return PREMIUM_MODEL


class ContentComplexityAnalyzer:
    """Score text complexity to choose a summarization tier.

    The caller must pass non-empty text.
    """

    def __init__(
        self,
        technical_terms: tuple[str, ...] = TECHNICAL_TERMS,
        reasoning_cues: re.Pattern[str] = REASONING_CUES,
    ) -> None:
        self.technical_terms = technical_terms
        self.reasoning_cues = reasoning_cues

    def factors(self, content: str) -> ComplexityFactors:
        words = content.lower().split()
        sentences = [s for s in _SENTENCE_SPLIT.split(content) if s.strip()]
        word_count = max(len(words), 1)
        sentence_count = max(len(sentences), 1)

        technical_words = sum(
            1 for word in words if any(term in word for term in self.technical_terms)
        )
        technical = _clamp(technical_words / word_count * 10)

        avg_words_per_sentence = len(words) / sentence_count
        complexity = _clamp((avg_words_per_sentence - 10) / 5)

        depth = _clamp(len(content) / 2000 * 5)

        reasoning_matches = len(self.reasoning_cues.findall(content))
        reasoning = _clamp(reasoning_matches / 10 * 10)

        return ComplexityFactors(
            technical_terms=_round_half_up(technical),
            sentence_complexity=_round_half_up(complexity),
            topic_depth=_round_half_up(depth),
            required_reasoning=_round_half_up(reasoning),
        )

    def analyze(self, content: str) -> ComplexityAnalysis:
        """Score ``content`` and recommend a model tier.

        Args:
            content: Text to score

        Returns:
            ComplexityAnalysis with the rounded 0-10 score, the four
            factors and the tier matching the score
        """
        factors = self.factors(content)
        weighted = (
            factors.technical_terms * WEIGHTS.technical_terms
            + factors.sentence_complexity * WEIGHTS.sentence_complexity
            + factors.topic_depth * WEIGHTS.topic_depth
            + factors.required_reasoning * WEIGHTS.required_reasoning
        ) / 10
        score = int(_clamp(_round_half_up(weighted)))

        return ComplexityAnalysis(
            score=score,
            factors=factors,
            recommended_model=tier_for_score(score),
            confidence=min(1.0, weighted / 10),
        )
