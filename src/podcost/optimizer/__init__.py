"""Summarization cost optimization: complexity scoring, budgets, reuse."""

from .budget import BudgetLedger
from .complexity import ContentComplexityAnalyzer
from .models import (
    BudgetCheck,
    BudgetLimits,
    BudgetState,
    ComplexityAnalysis,
    ComplexityFactors,
    CostSummary,
    OptimizationDecision,
)
from .optimizer import CostOptimizer, estimate_cost

__all__ = [
    "BudgetCheck",
    "BudgetLedger",
    "BudgetLimits",
    "BudgetState",
    "ComplexityAnalysis",
    "ComplexityFactors",
    "ContentComplexityAnalyzer",
    "CostOptimizer",
    "CostSummary",
    "OptimizationDecision",
    "estimate_cost",
]
