"""Unit tests for CostOptimizer summarization planning."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from podcost.optimizer import BudgetLimits, CostOptimizer, estimate_cost
from podcost.optimizer.models import CHEAP_MODEL, MID_MODEL, PREMIUM_MODEL

DENSE_BLOCK = (
    "algorithm database server protocol framework api quantum "
    "because therefore however why how "
)
SIMPLE_TEXT = "Simple news: The weather is nice today."
# Complexity score 5
MID_TEXT = (DENSE_BLOCK * 2).strip()
# Complexity score 9
PREMIUM_TEXT = (DENSE_BLOCK * 50).strip()


class TestEstimateCost:
    """Test the character-based cost proxy."""

    def test_four_characters_per_token(self) -> None:
        """Test 4000 characters at the premium rate."""
        assert estimate_cost("x" * 4000, PREMIUM_MODEL) == pytest.approx(0.0025)

    def test_unknown_model_uses_default_rate(self) -> None:
        """Test unpriced models fall back to 0.001 per 1000 tokens."""
        assert estimate_cost("x" * 4000, "mystery-model") == pytest.approx(0.001)


class TestOptimizeProcessing:
    """Test the process/reuse/deny decision."""

    @pytest.mark.asyncio
    async def test_fresh_content_is_processed(self, clock) -> None:
        """Test new content gets a model recommendation and a cost."""
        optimizer = CostOptimizer(clock=clock)

        decision = await optimizer.optimize_processing(SIMPLE_TEXT)

        assert decision.should_process is True
        assert decision.recommended_model == CHEAP_MODEL
        assert decision.estimated_cost == pytest.approx(estimate_cost(SIMPLE_TEXT, CHEAP_MODEL))
        assert decision.reason == f"Content complexity: 0/10, Model: {CHEAP_MODEL}"
        assert decision.quality_trade == "none"
        assert decision.cache_hit is None
        assert decision.complexity.score == 0

    @pytest.mark.asyncio
    async def test_cached_summary_is_reused(self, clock) -> None:
        """Test a cached summary short-circuits with zero cost."""
        optimizer = CostOptimizer(clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "Nice weather.", model=MID_MODEL, cost=0.001)

        decision = await optimizer.optimize_processing(SIMPLE_TEXT)

        assert decision.should_process is False
        assert decision.estimated_cost == 0.0
        assert decision.reason == "Content found in cache"
        assert decision.recommended_model == MID_MODEL
        assert decision.cache_hit.payload == "Nice weather."

    @pytest.mark.asyncio
    async def test_cache_key_ignores_case_and_whitespace(self, clock) -> None:
        """Test normalized content hits the same cache entry."""
        optimizer = CostOptimizer(clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=0.0)

        decision = await optimizer.optimize_processing(f"  {SIMPLE_TEXT.upper()}\n")

        assert decision.cache_hit is not None

    @pytest.mark.asyncio
    async def test_cached_summary_expires_after_48_hours(self, clock) -> None:
        """Test a summary older than 48 hours is no longer reused."""
        optimizer = CostOptimizer(clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=0.0)

        clock.advance(hours=48, seconds=1)
        decision = await optimizer.optimize_processing(SIMPLE_TEXT)

        assert decision.should_process is True
        assert decision.cache_hit is None

    @pytest.mark.asyncio
    async def test_repeated_calls_are_idempotent(self, clock) -> None:
        """Test the same uncached input yields the same decision."""
        optimizer = CostOptimizer(clock=clock)

        first = await optimizer.optimize_processing(MID_TEXT)
        second = await optimizer.optimize_processing(MID_TEXT)

        assert first == second

    @pytest.mark.asyncio
    async def test_budget_denial(self, clock) -> None:
        """Test an exhausted daily budget denies processing."""
        optimizer = CostOptimizer(BudgetLimits(daily=0.0, monthly=50.0, per_request=1.0), clock=clock)

        decision = await optimizer.optimize_processing(PREMIUM_TEXT)

        assert decision.should_process is False
        assert decision.recommended_model == CHEAP_MODEL
        assert decision.estimated_cost == 0.0
        assert decision.reason == "Budget constraints - daily/monthly limit reached"
        assert decision.quality_trade == "moderate"

    @pytest.mark.asyncio
    async def test_force_process_overrides_budget(self, clock) -> None:
        """Test force_process proceeds despite a failed budget check."""
        optimizer = CostOptimizer(BudgetLimits(daily=0.0, monthly=50.0, per_request=1.0), clock=clock)

        decision = await optimizer.optimize_processing(PREMIUM_TEXT, force_process=True)

        assert decision.should_process is True
        assert decision.recommended_model == PREMIUM_MODEL

    @pytest.mark.asyncio
    async def test_cache_hit_wins_over_exhausted_budget(self, clock) -> None:
        """Test reuse is offered even when nothing could be paid for."""
        optimizer = CostOptimizer(BudgetLimits(daily=0.0, monthly=0.0, per_request=0.0), clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=0.0)

        decision = await optimizer.optimize_processing(SIMPLE_TEXT)

        assert decision.reason == "Content found in cache"


class TestQualityOverrides:
    """Test required_quality adjustments to the recommended tier."""

    @pytest.mark.asyncio
    async def test_basic_quality_downgrades_moderate_content(self, clock) -> None:
        """Test basic quality uses the cheapest tier for scores up to 6."""
        optimizer = CostOptimizer(clock=clock)

        decision = await optimizer.optimize_processing(MID_TEXT, required_quality="basic")

        assert decision.recommended_model == CHEAP_MODEL
        assert decision.quality_trade == "minor"

    @pytest.mark.asyncio
    async def test_basic_quality_keeps_premium_for_complex_content(self, clock) -> None:
        """Test basic quality does not downgrade scores above 6."""
        optimizer = CostOptimizer(clock=clock)

        decision = await optimizer.optimize_processing(PREMIUM_TEXT, required_quality="basic")

        assert decision.recommended_model == PREMIUM_MODEL
        assert decision.quality_trade == "none"

    @pytest.mark.asyncio
    async def test_standard_quality_uses_mid_tier(self, clock) -> None:
        """Test standard quality selects the mid tier for scores up to 8."""
        optimizer = CostOptimizer(clock=clock)

        decision = await optimizer.optimize_processing(MID_TEXT, required_quality="standard")

        assert decision.recommended_model == MID_MODEL
        assert decision.quality_trade == "none"

    @pytest.mark.asyncio
    async def test_standard_quality_keeps_premium_above_eight(self, clock) -> None:
        """Test standard quality leaves score-9 content on premium."""
        optimizer = CostOptimizer(clock=clock)

        decision = await optimizer.optimize_processing(PREMIUM_TEXT, required_quality="standard")

        assert decision.recommended_model == PREMIUM_MODEL


class TestCostTracking:
    """Test spend accounting and summary reporting."""

    @pytest.mark.asyncio
    async def test_cache_summary_records_cost(self, clock) -> None:
        """Test caching a summary adds its cost to the ledger."""
        optimizer = CostOptimizer(clock=clock)

        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=0.25)
        await optimizer.cache_summary(MID_TEXT, "s", model=MID_MODEL, cost=0.5)

        summary = optimizer.get_cost_summary()
        assert summary.daily == pytest.approx(0.75)
        assert summary.monthly == pytest.approx(0.75)
        assert summary.budget == optimizer.budget

    @pytest.mark.asyncio
    async def test_resets(self, clock) -> None:
        """Test daily and monthly resets are independent."""
        optimizer = CostOptimizer(clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=1.0)

        optimizer.reset_daily_costs()
        assert optimizer.get_cost_summary().daily == 0.0
        assert optimizer.get_cost_summary().monthly == 1.0

        optimizer.reset_monthly_costs()
        assert optimizer.get_cost_summary().monthly == 0.0

    @pytest.mark.asyncio
    async def test_spend_leads_to_denial(self, clock) -> None:
        """Test recorded spend eventually exhausts the daily budget."""
        optimizer = CostOptimizer(BudgetLimits(daily=0.5, monthly=50.0, per_request=1.0), clock=clock)
        await optimizer.cache_summary(MID_TEXT, "s", model=MID_MODEL, cost=0.5)

        decision = await optimizer.optimize_processing(PREMIUM_TEXT)

        assert decision.should_process is False

    @pytest.mark.asyncio
    async def test_cache_hit_rate(self, clock) -> None:
        """Test hit rate is summary cache hits over lookups."""
        optimizer = CostOptimizer(clock=clock)
        await optimizer.cache_summary(SIMPLE_TEXT, "s", model=CHEAP_MODEL, cost=0.0)

        await optimizer.optimize_processing(SIMPLE_TEXT)
        await optimizer.optimize_processing(MID_TEXT)

        assert optimizer.get_cost_summary().cache_hit_rate == 0.5

    def test_empty_hit_rate_is_zero(self) -> None:
        """Test no lookups reports a zero hit rate."""
        assert CostOptimizer().get_cost_summary().cache_hit_rate == 0.0
