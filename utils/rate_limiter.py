"""
Sliding-window rate limiter for per-user insight requests.
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple

from core import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Sliding-window rate limiter for per-user request throttling.

    Guards against bursts of insight requests inside the daily budget.
    Uses in-memory storage, so the limit holds per process only.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maximum requests allowed per window (0 disables the limiter)
            window_seconds: Time window in seconds
            clock: Monotonic time source in seconds
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.disabled = max_requests == 0
        self._clock = clock

        # Store timestamps per user_id using deque for efficient sliding window
        self._timestamps: Dict[str, Deque[float]] = {}

        logger.info(
            "Rate limiter initialized",
            max_requests=max_requests,
            window_seconds=window_seconds,
            disabled=self.disabled,
        )

    def check_rate_limit(self, user_id: str) -> Tuple[bool, int]:
        """
        Check if user has exceeded rate limit and record the request if not.

        Args:
            user_id: User ID to check

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        if self.disabled:
            return True, self.max_requests

        now = self._clock()
        cutoff = now - self.window_seconds

        timestamps = self._timestamps.setdefault(user_id, deque())

        # Drop timestamps outside the window
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()

        current_count = len(timestamps)
        if current_count >= self.max_requests:
            logger.warning(
                "Rate limit exceeded",
                user_id=user_id,
                count=current_count,
                max_requests=self.max_requests,
                window_seconds=self.window_seconds,
            )
            return False, 0

        timestamps.append(now)
        return True, self.max_requests - current_count - 1

    def reset_user(self, user_id: str) -> None:
        """Reset rate limit for a specific user."""
        if user_id in self._timestamps:
            self._timestamps[user_id].clear()
            logger.info("Rate limit reset", user_id=user_id)

    def reset_all(self) -> None:
        """Forget every user's request history."""
        self._timestamps.clear()
