"""Data models for summarization cost optimization."""

from dataclasses import dataclass
from typing import Literal

from ..cache.models import CacheEntry

QualityTrade = Literal["none", "minor", "moderate"]
RequiredQuality = Literal["basic", "standard", "premium"]

CHEAP_MODEL = "gpt-3.5-turbo"
MID_MODEL = "gpt-4o-mini"
PREMIUM_MODEL = "gpt-4o"

# Currency units per 1000 tokens
MODEL_PRICING: dict[str, float] = {
    CHEAP_MODEL: 0.0005,
    MID_MODEL: 0.00015,
    PREMIUM_MODEL: 0.0025,
}
DEFAULT_PRICE_PER_1K_TOKENS = 0.001

CHARS_PER_TOKEN = 4


@dataclass(frozen=True)
class ComplexityFactors:
    """Sub-scores, each an integer from 0 to 10."""

    technical_terms: int
    sentence_complexity: int
    topic_depth: int
    required_reasoning: int


@dataclass(frozen=True)
class ComplexityAnalysis:
    score: int
    factors: ComplexityFactors
    recommended_model: str
    confidence: float


@dataclass(frozen=True)
class BudgetLimits:
    daily: float = 5.0
    monthly: float = 50.0
    per_request: float = 1.0

    def __post_init__(self) -> None:
        for name in ("daily", "monthly", "per_request"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} budget cannot be negative")


@dataclass(frozen=True)
class BudgetState:
    daily_spent: float
    monthly_spent: float


@dataclass(frozen=True)
class BudgetCheck:
    can_afford: bool
    remaining_daily: float
    remaining_monthly: float


@dataclass(frozen=True)
class OptimizationDecision:
    """Outcome of one optimization call. Never stored."""

    should_process: bool
    recommended_model: str
    estimated_cost: float
    reason: str
    quality_trade: QualityTrade
    cache_hit: CacheEntry[str] | None = None
    complexity: ComplexityAnalysis | None = None


@dataclass(frozen=True)
class CostSummary:
    daily: float
    monthly: float
    budget: BudgetLimits
    cache_hit_rate: float
