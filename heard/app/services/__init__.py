"""Domain services: comment ranking and rate limiting."""

from heard.app.services import wilson_score
from heard.app.services.rate_limit import FixedWindowRateLimiter

__all__ = [
    "wilson_score",
    "FixedWindowRateLimiter",
]
