"""Cost-aware summarization planning.

Decides, per summarization request, whether to reuse a cached summary,
which model tier to use, and whether the budget allows the call. The
optimizer never calls a summarizer itself; the caller reports results
back through ``cache_summary``.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ..cache.keys import summary_hash
from ..cache.models import CacheEntry
from ..cache.storage import CachePersistence
from ..cache.store import SUMMARY_TTL, ContentAddressedCache
from .budget import BudgetLedger
from .complexity import ContentComplexityAnalyzer
from .models import (
    CHARS_PER_TOKEN,
    CHEAP_MODEL,
    DEFAULT_PRICE_PER_1K_TOKENS,
    MID_MODEL,
    MODEL_PRICING,
    BudgetLimits,
    ComplexityAnalysis,
    CostSummary,
    OptimizationDecision,
    QualityTrade,
    RequiredQuality,
)

logger = logging.getLogger(__name__)


def estimate_cost(content: str, model: str) -> float:
    """Estimate summarization cost from a 4-characters-per-token proxy."""
    tokens = len(content) / CHARS_PER_TOKEN
    return tokens / 1000 * MODEL_PRICING.get(model, DEFAULT_PRICE_PER_1K_TOKENS)


class CostOptimizer:
    """Plans summarization calls against a cache and a budget.

    Example:
        optimizer = CostOptimizer(BudgetLimits(daily=5.0, monthly=50.0, per_request=1.0))

        decision = await optimizer.optimize_processing(article_text)
        if decision.should_process:
            summary, cost = await summarize(article_text, decision.recommended_model)
            await optimizer.cache_summary(
                article_text, summary, model=decision.recommended_model, cost=cost
            )
        else:
            summary = decision.cache_hit.payload if decision.cache_hit else None
    """

    def __init__(
        self,
        budget: BudgetLimits | None = None,
        *,
        ledger: BudgetLedger | None = None,
        analyzer: ContentComplexityAnalyzer | None = None,
        persistence: CachePersistence[str] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.ledger = ledger or BudgetLedger(budget)
        self.analyzer = analyzer or ContentComplexityAnalyzer()
        self.cache: ContentAddressedCache[str] = ContentAddressedCache(
            SUMMARY_TTL, persistence, clock
        )

    @property
    def budget(self) -> BudgetLimits:
        return self.ledger.limits

    def analyze(self, content: str) -> ComplexityAnalysis:
        return self.analyzer.analyze(content)

    async def optimize_processing(
        self,
        content: str,
        *,
        force_process: bool = False,
        required_quality: RequiredQuality | None = None,
    ) -> OptimizationDecision:
        """Decide how to handle a summarization request.

        Args:
            content: Raw text to be summarized
            force_process: Proceed even when the budget check fails
            required_quality: Caller's quality floor ("basic", "standard",
                "premium"); None keeps the analyzer's recommendation

        Returns:
            OptimizationDecision describing reuse, denial or the model to use
        """
        content_hash = summary_hash(content)
        cached = await self.cache.get(content_hash)
        if cached is not None:
            logger.debug(f"Summary cache hit for {content_hash[:12]}")
            return OptimizationDecision(
                should_process=False,
                recommended_model=cached.metadata.model,
                estimated_cost=0.0,
                reason="Content found in cache",
                quality_trade="none",
                cache_hit=cached,
            )

        complexity = self.analyzer.analyze(content)

        budget_check = self.ledger.can_afford(
            estimate_cost(content, complexity.recommended_model)
        )
        if not budget_check.can_afford and not force_process:
            logger.info(
                f"Denied summarization: budget constraints "
                f"(remaining daily {budget_check.remaining_daily:.4f}, "
                f"monthly {budget_check.remaining_monthly:.4f})"
            )
            return OptimizationDecision(
                should_process=False,
                recommended_model=CHEAP_MODEL,
                estimated_cost=0.0,
                reason="Budget constraints - daily/monthly limit reached",
                quality_trade="moderate",
                complexity=complexity,
            )

        final_model = complexity.recommended_model
        quality_trade: QualityTrade = "none"
        if required_quality == "basic" and complexity.score <= 6:
            final_model = CHEAP_MODEL
            quality_trade = "minor"
        elif required_quality == "standard" and complexity.score <= 8:
            final_model = MID_MODEL

        estimated = estimate_cost(content, final_model)
        logger.debug(
            f"Summarization plan: score={complexity.score}, model={final_model}, "
            f"estimated_cost={estimated:.6f}"
        )
        return OptimizationDecision(
            should_process=True,
            recommended_model=final_model,
            estimated_cost=estimated,
            reason=f"Content complexity: {complexity.score}/10, Model: {final_model}",
            quality_trade=quality_trade,
            complexity=complexity,
        )

    async def cache_summary(
        self,
        content: str,
        summary: str,
        *,
        model: str,
        cost: float,
        quality: float | None = None,
    ) -> CacheEntry[str]:
        """Store a produced summary for 48 hours and record its cost."""
        entry = await self.cache.put(
            summary_hash(content), summary, model=model, cost=cost, quality=quality
        )
        self.ledger.record(cost)
        logger.info(f"Cached summary {entry.content_hash[:12]} ({model}, cost {cost:.6f})")
        return entry

    def get_cost_summary(self) -> CostSummary:
        state = self.ledger.state
        return CostSummary(
            daily=state.daily_spent,
            monthly=state.monthly_spent,
            budget=self.ledger.limits,
            cache_hit_rate=self.cache.stats().hit_rate,
        )

    def reset_daily_costs(self) -> None:
        self.ledger.reset_daily()

    def reset_monthly_costs(self) -> None:
        self.ledger.reset_monthly()

    def close(self) -> None:
        self.cache.close()
