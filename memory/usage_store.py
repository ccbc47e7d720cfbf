"""
Per-user daily usage counters for the insight budget.

Counters are advisory: concurrent requests for the same user read and later
increment independently, so a brief overshoot of the budget is possible.
"""

from datetime import date, datetime, timezone
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from core import get_logger
from schemas import RateLimitConfig, UsageStatus

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class UsageStore(Protocol):
    """Key-value store of UsageStatus by user id."""

    async def get_status(self, user_id: str) -> UsageStatus:
        ...

    async def increment_usage(self, user_id: str, tokens: int) -> None:
        ...

    async def reset_daily_limits(self) -> None:
        ...


class InMemoryUsageStore:
    """
    Process-local usage store.

    Counters are cleared automatically when the UTC date changes. When limits
    are given, returned statuses carry is_limited for the daily ceilings.
    """

    def __init__(
        self,
        limits: Optional[RateLimitConfig] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.limits = limits
        self._clock = clock
        self._store: Dict[str, UsageStatus] = {}
        self._current_day: date = clock().date()

    def _ensure_daily_reset(self) -> None:
        today = self._clock().date()
        if today != self._current_day:
            logger.info("Daily usage counters rolled over", previous_day=str(self._current_day), users=len(self._store))
            self._store.clear()
            self._current_day = today

    def _with_limit_flag(self, status: UsageStatus) -> UsageStatus:
        if self.limits is None:
            return status
        limited = (
            status.calls_today >= self.limits.max_calls_per_day
            or status.tokens_today >= self.limits.max_tokens_per_day
        )
        return status.model_copy(update={"is_limited": limited})

    async def get_status(self, user_id: str) -> UsageStatus:
        self._ensure_daily_reset()
        status = self._store.get(user_id) or UsageStatus(user_id=user_id)
        return self._with_limit_flag(status.model_copy())

    async def increment_usage(self, user_id: str, tokens: int) -> None:
        self._ensure_daily_reset()
        current = self._store.get(user_id) or UsageStatus(user_id=user_id)
        self._store[user_id] = current.model_copy(
            update={
                "calls_today": current.calls_today + 1,
                "tokens_today": current.tokens_today + max(0, tokens),
                "last_call_time": self._clock(),
            }
        )
        logger.debug(
            "Usage incremented",
            user_id=user_id,
            calls_today=self._store[user_id].calls_today,
            tokens_today=self._store[user_id].tokens_today,
        )

    async def reset_daily_limits(self) -> None:
        """Clear all counters now, regardless of the date."""
        logger.info("Daily usage counters reset", users=len(self._store))
        self._store.clear()
        self._current_day = self._clock().date()
