"""Running spend tracking against daily, monthly and per-request ceilings."""

import logging
import threading

from .models import BudgetCheck, BudgetLimits, BudgetState

logger = logging.getLogger(__name__)


class BudgetLedger:
    """Tracks daily and monthly spend.

    Counters only grow between explicit resets; there is no automatic
    day or month rollover. All reads and writes hold one lock, so
    concurrent ``record`` calls never lose an increment.

    Example:
        ledger = BudgetLedger(BudgetLimits(daily=5.0, monthly=50.0, per_request=1.0))
        if ledger.can_afford(0.02).can_afford:
            ...
            ledger.record(0.018)
    """

    def __init__(self, limits: BudgetLimits | None = None) -> None:
        self.limits = limits or BudgetLimits()
        self._daily_spent = 0.0
        self._monthly_spent = 0.0
        self._lock = threading.Lock()

    def can_afford(self, estimated_cost: float) -> BudgetCheck:
        """Check whether ``estimated_cost`` fits every ceiling."""
        with self._lock:
            affordable = (
                self._daily_spent + estimated_cost <= self.limits.daily
                and self._monthly_spent + estimated_cost <= self.limits.monthly
                and estimated_cost <= self.limits.per_request
            )
            return BudgetCheck(
                can_afford=affordable,
                remaining_daily=self.limits.daily - self._daily_spent,
                remaining_monthly=self.limits.monthly - self._monthly_spent,
            )

    def record(self, cost: float) -> None:
        if cost < 0:
            raise ValueError(f"cost cannot be negative, got {cost}")
        with self._lock:
            self._daily_spent += cost
            self._monthly_spent += cost
        logger.debug(f"Recorded spend {cost:.6f}")

    def reset_daily(self) -> None:
        with self._lock:
            self._daily_spent = 0.0
        logger.info("Daily spend reset")

    def reset_monthly(self) -> None:
        with self._lock:
            self._monthly_spent = 0.0
        logger.info("Monthly spend reset")

    @property
    def state(self) -> BudgetState:
        with self._lock:
            return BudgetState(
                daily_spent=self._daily_spent, monthly_spent=self._monthly_spent
            )
