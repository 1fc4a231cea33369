"""
In-memory sliding-window rate limiter, keyed by user + action.

This is early feedback for the user (double clicks, rapid resubmits), not a
security boundary: the store enforces its own authorization.
"""
import logging
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from fastapi import Depends

from followuply.config import config
from followuply.deps import get_current_user_id
from followuply.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


def user_key(user_id: str, action: str) -> str:
    return f"user:{user_id}:{action}"


class RateLimiter:
    """Owns its own timestamp store so tests can start from a clean slate"""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or _monotonic_ms
        self._timestamps: Dict[str, List[float]] = defaultdict(list)

    def now(self) -> float:
        return self._clock()

    def _clean_old_entries(self, key: str, now: float, window_ms: float):
        """Remove timestamps older than the window"""
        cutoff = now - window_ms
        kept = [t for t in self._timestamps[key] if t >= cutoff]
        if kept:
            self._timestamps[key] = kept
        else:
            del self._timestamps[key]

    def check(self, key: str, limit: int, window_ms: float) -> bool:
        """
        Record an attempt and say whether it is within the limit.

        Attempts that are turned away are not recorded, so a burst of
        rejected clicks does not extend the wait.
        """
        if limit <= 0:
            return False

        now = self._clock()
        self._clean_old_entries(key, now, window_ms)

        if len(self._timestamps.get(key, [])) >= limit:
            return False

        self._timestamps[key].append(now)
        return True

    def usage(self, key: str) -> int:
        return len(self._timestamps.get(key, []))

    def reset(self, key: Optional[str] = None):
        if key is None:
            self._timestamps.clear()
        else:
            self._timestamps.pop(key, None)


class RateLimitGate:
    """
    Wraps gated actions. Once a key goes over its limit it stays blocked for
    a full window; when that countdown runs out the key starts over empty.
    """

    def __init__(self, limiter: Optional[RateLimiter] = None):
        self.limiter = limiter or RateLimiter()
        self._blocked_until: Dict[str, float] = {}

    def remaining_ms(self, key: str) -> float:
        until = self._blocked_until.get(key)
        if until is None:
            return 0
        remaining = until - self.limiter.now()
        if remaining <= 0:
            # Countdown finished: window resets to empty
            del self._blocked_until[key]
            self.limiter.reset(key)
            return 0
        return remaining

    def attempt(self, user_id: str, action: str, limit: int, window_ms: float):
        """Raise RateLimitExceeded when the action has to wait"""
        key = user_key(user_id, action)

        remaining = self.remaining_ms(key)
        if remaining > 0:
            raise RateLimitExceeded(action, remaining / 1000)

        if not self.limiter.check(key, limit, window_ms):
            self._blocked_until[key] = self.limiter.now() + window_ms
            logger.warning(
                f"Rate limit exceeded: user={user_id} action={action} "
                f"limit={limit} window_ms={window_ms}"
            )
            raise RateLimitExceeded(action, window_ms / 1000)

    def close(self):
        """Drop pending countdowns (shutdown)"""
        self._blocked_until.clear()
        self.limiter.reset()


# Process-wide gate used by the API; tests swap it via dependency overrides
_gate: Optional[RateLimitGate] = None


def get_rate_limit_gate() -> RateLimitGate:
    global _gate
    if _gate is None:
        _gate = RateLimitGate()
    return _gate


def rate_limited(action: str):
    """FastAPI dependency factory gating a route by (current user, action)"""
    limit, window_seconds = config.rate_limit_for(action)

    async def rate_limit_dependency(
        user_id: str = Depends(get_current_user_id),
        gate: RateLimitGate = Depends(get_rate_limit_gate),
    ):
        gate.attempt(user_id, action, limit, window_seconds * 1000)

    return rate_limit_dependency
