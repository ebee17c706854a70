"""Rate limiting data models.

This module contains dataclasses for rate limit rules, state and results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitRule:
    """At most ``max`` actions per fixed window of ``window_ms`` milliseconds."""
    max: int
    window_ms: int

    def __post_init__(self) -> None:
        if self.max < 1:
            raise ValueError("max must be at least 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be at least 1")


@dataclass
class RateLimitRecord:
    """Counter for one (action kind, identity) pair within its current window."""
    key: str
    count: int
    window_reset_at: float  # epoch milliseconds


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int
    limit: int
    reset_at_ms: float

    @property
    def reset_at_seconds(self) -> int:
        return int(self.reset_at_ms // 1000)
