"""Fixed-window rate limiter.

Counts actions per ``(action kind, identity)`` key in fixed windows. A new
window starts on the first action after the previous one lapsed. Records are
only replaced lazily when their key is checked again, never swept. Memory
therefore grows with the number of distinct identities seen over the
process lifetime.

A burst straddling a window reset can let through up to ``2 * max`` actions
in a short span. That is inherent to fixed windows and kept as is.
"""

import threading
import time
from typing import Callable, Dict, Mapping, Optional

from heard.app.core.config import Settings
from heard.app.core.logging import get_logger
from heard.app.services.rate_limit.models import (
    RateLimitRecord,
    RateLimitResult,
    RateLimitRule,
)

logger = get_logger(__name__)

SUBMISSIONS = "submissions"
VOTES = "votes"


def wall_clock_ms() -> float:
    return time.time() * 1000


def rules_from_settings(config: Settings) -> Dict[str, RateLimitRule]:
    """Build the static action-kind table from application settings."""
    return {
        SUBMISSIONS: RateLimitRule(
            max=config.rate_limit_submissions_max,
            window_ms=config.rate_limit_submissions_window_ms,
        ),
        VOTES: RateLimitRule(
            max=config.rate_limit_votes_max,
            window_ms=config.rate_limit_votes_window_ms,
        ),
    }


class FixedWindowRateLimiter:
    """In-memory fixed-window rate limiter.

    One instance is created per application and shared by all requests.
    ``check`` is safe to call from multiple threads: the read, compare and
    increment happen under a single lock.

    Args:
        rules: Mapping of action kind to its rule; fixed for the instance lifetime
        clock: Returns the current time in milliseconds
    """

    def __init__(
        self,
        rules: Mapping[str, RateLimitRule],
        clock: Optional[Callable[[], float]] = None,
    ):
        self._rules: Dict[str, RateLimitRule] = dict(rules)
        self._clock = clock or wall_clock_ms
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    @property
    def rules(self) -> Mapping[str, RateLimitRule]:
        return self._rules

    def now(self) -> float:
        """Current time in milliseconds, as seen by this limiter's clock."""
        return self._clock()

    def rule_for(self, action_kind: str) -> RateLimitRule:
        try:
            return self._rules[action_kind]
        except KeyError:
            raise KeyError(f"No rate limit configured for action {action_kind!r}") from None

    def check(self, identity: str, action_kind: str) -> RateLimitResult:
        """Count one action for ``identity`` and report whether it is allowed.

        A rejected check leaves the record untouched, so repeated attempts
        while blocked neither extend nor reset the window.

        Raises:
            KeyError: If ``action_kind`` has no configured rule
        """
        rule = self.rule_for(action_kind)
        key = f"{action_kind}:{identity}"

        with self._lock:
            now = self._clock()
            record = self._records.get(key)

            if record is None or now >= record.window_reset_at:
                record = RateLimitRecord(
                    key=key, count=1, window_reset_at=now + rule.window_ms
                )
                self._records[key] = record
                return RateLimitResult(
                    allowed=True,
                    remaining=rule.max - 1,
                    limit=rule.max,
                    reset_at_ms=record.window_reset_at,
                )

            if record.count >= rule.max:
                logger.debug(f"Rate limit reached for {key}")
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    limit=rule.max,
                    reset_at_ms=record.window_reset_at,
                )

            record.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=rule.max - record.count,
                limit=rule.max,
                reset_at_ms=record.window_reset_at,
            )

    def get_record(self, identity: str, action_kind: str) -> Optional[RateLimitRecord]:
        """Return the stored record for a key, stale or not."""
        with self._lock:
            return self._records.get(f"{action_kind}:{identity}")

    def __len__(self) -> int:
        return len(self._records)
