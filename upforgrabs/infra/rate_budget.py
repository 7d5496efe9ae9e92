"""
Rate budget tracking for GitHub API access.

The gate never waits or retries. It answers go/no-go before each call,
and the transport feeds it fresh numbers after each response.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

from ..exit_codes import RateLimitExhausted

logger = logging.getLogger(__name__)


class BudgetStatus(Enum):
    """Go/no-go answer from the gate."""
    OK = "ok"
    LOW = "low"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class RateBudget:
    """GitHub API rate limit counters."""
    remaining: int
    limit: int
    reset_seconds: int  # Seconds until the quota resets

    @property
    def remaining_percent(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.remaining * 100) // self.limit

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], now: Optional[float] = None) -> Optional['RateBudget']:
        """
        Build from X-RateLimit-* response headers.

        Returns None when the headers are absent or unparsable.
        """
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_at = int(headers.get('X-RateLimit-Reset', 0))
        except (ValueError, TypeError):
            return None

        if remaining < 0 or limit < 0:
            return None

        now = time.time() if now is None else now
        return cls(remaining=remaining, limit=limit, reset_seconds=max(0, reset_at - int(now)))


class RateBudgetGate:
    """
    Tracks the remaining API budget for one run and enforces a hard stop.

    Once the budget reaches zero the gate stays exhausted for the rest of
    the run, whatever later responses report.

    Example:
        gate = RateBudgetGate(fetch_budget=client.get_rate_limit)
        if gate.check() is BudgetStatus.EXHAUSTED:
            ...
    """

    def __init__(
        self,
        fetch_budget: Optional[Callable[[], RateBudget]] = None,
        low_fraction: float = 0.2,
        warn_every: int = 10,
    ):
        """
        Initialize RateBudgetGate.

        Args:
            fetch_budget: Called once to seed the budget when nothing has
                been observed yet
            low_fraction: Fraction of the limit under which the budget is low
            warn_every: Log a warning when a low budget is a multiple of this
        """
        self.fetch_budget = fetch_budget
        self.low_fraction = low_fraction
        self.warn_every = warn_every
        self.budget: Optional[RateBudget] = None
        self._exhausted = False

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def observe(self, budget: Optional[RateBudget]) -> None:
        """Record the budget reported by the latest API response."""
        if budget is None:
            return
        self.budget = budget
        if budget.remaining <= 0:
            self._exhausted = True

    def check(self) -> BudgetStatus:
        """Decide whether another external call may be made."""
        if self._exhausted:
            return BudgetStatus.EXHAUSTED

        if self.budget is None and self.fetch_budget is not None:
            self.observe(self.fetch_budget())

        budget = self.budget
        if budget is None:
            return BudgetStatus.OK

        status = BudgetStatus.OK
        if budget.remaining < budget.limit * self.low_fraction:
            status = BudgetStatus.LOW
            if self.warn_every and budget.remaining % self.warn_every == 0:
                logger.warning(
                    f"Rate limit: {budget.remaining}/{budget.limit} - "
                    f"{budget.reset_seconds}s before reset"
                )

        if budget.remaining <= 0:
            self._exhausted = True
            return BudgetStatus.EXHAUSTED

        return status

    def require(self) -> None:
        """Raise RateLimitExhausted unless another call may be made."""
        if self.check() is BudgetStatus.EXHAUSTED:
            raise RateLimitExhausted()
