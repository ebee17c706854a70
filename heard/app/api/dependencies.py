"""Shared FastAPI dependencies for the public API.

Application-scoped objects (settings, rate limiter) live on ``app.state``
and are injected into handlers here rather than imported as globals.
"""

from typing import Annotated

from fastapi import Depends, Request

from heard.app.core.config import Settings
from heard.app.core.logging import get_log_context, get_logger
from heard.app.core.security import get_client_ip, hash_identity
from heard.app.exceptions import RateLimitExceededError
from heard.app.middleware.request_id import get_request_id
from heard.app.services.rate_limit import (
    SUBMISSIONS,
    VOTES,
    FixedWindowRateLimiter,
    RateLimitResult,
)

logger = get_logger(__name__)

_WINDOW_NAMES = (
    (24 * 60 * 60 * 1000, "day"),
    (60 * 60 * 1000, "hour"),
    (60 * 1000, "minute"),
    (1000, "second"),
)

# What the user is limited on, phrased for the 429 message
_ACTION_PHRASES = {
    SUBMISSIONS: "submit up to {max} experiences",
    VOTES: "cast up to {max} votes",
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


SettingsDep = Annotated[Settings, Depends(get_settings)]
RateLimiterDep = Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)]


def get_client_identity(request: Request, settings: SettingsDep) -> str:
    """Hashed client IP used as the anonymous identity."""
    return hash_identity(get_client_ip(request), settings.ip_hash_salt)


ClientIdentityDep = Annotated[str, Depends(get_client_identity)]


def describe_window(window_ms: int) -> str:
    """Phrase a window length for users, e.g. ``"day"`` or ``"30 minutes"``."""
    for unit_ms, name in _WINDOW_NAMES:
        if window_ms >= unit_ms and window_ms % unit_ms == 0:
            count = window_ms // unit_ms
            return name if count == 1 else f"{count} {name}s"
    return f"{window_ms} ms"


def rate_limit_message(action_kind: str, max_actions: int, window_ms: int) -> str:
    phrase = _ACTION_PHRASES.get(action_kind, f"perform up to {{max}} {action_kind}")
    return (
        f"Rate limit exceeded. You can {phrase.format(max=max_actions)} "
        f"per {describe_window(window_ms)}."
    )


def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter,
    identity: str,
    action_kind: str,
) -> RateLimitResult:
    """Count an action against the client's quota.

    Returns:
        The limiter result when the action is allowed

    Raises:
        RateLimitExceededError: If the client has no quota left in this window
    """
    result = limiter.check(identity, action_kind)
    if result.allowed:
        return result

    rule = limiter.rule_for(action_kind)
    logger.warning(
        f"Rate limit exceeded for {action_kind}",
        extra=get_log_context(
            request_id=get_request_id(request),
            client_hash=identity,
            action_kind=action_kind,
        ),
    )
    raise RateLimitExceededError(
        action_kind=action_kind,
        limit=result.limit,
        reset_at_ms=result.reset_at_ms,
        detail=rate_limit_message(action_kind, rule.max, rule.window_ms),
    )
