"""Per-identity action throttling for anonymous clients.

Submissions and votes are capped per hashed client IP using a fixed-window
counter held in process memory.
"""

from heard.app.services.rate_limit.limiter import (
    SUBMISSIONS,
    VOTES,
    FixedWindowRateLimiter,
    rules_from_settings,
    wall_clock_ms,
)
from heard.app.services.rate_limit.models import (
    RateLimitRecord,
    RateLimitResult,
    RateLimitRule,
)

__all__ = [
    # Models
    "RateLimitRule",
    "RateLimitRecord",
    "RateLimitResult",
    # Limiter
    "FixedWindowRateLimiter",
    "rules_from_settings",
    "wall_clock_ms",
    "SUBMISSIONS",
    "VOTES",
]
