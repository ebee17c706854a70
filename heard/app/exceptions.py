"""Custom exceptions for the Heard backend."""

from typing import Optional


class HeardException(Exception):
    """Base class for application exceptions with an HTTP status code.

    Subclasses define ``status_code`` and ``error_code`` so the exception
    handlers in ``main`` can render a consistent JSON body.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)


class RateLimitExceededError(HeardException):
    """Raised by the HTTP layer when a client used up its window quota.

    The rate limiter itself never raises; it returns ``allowed=False`` and
    the route translates that into this exception.

    Maps to HTTP 429 Too Many Requests.
    """
    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        action_kind: str,
        limit: int,
        reset_at_ms: Optional[float] = None,
        detail: Optional[str] = None,
    ):
        self.action_kind = action_kind
        self.limit = limit
        self.reset_at_ms = reset_at_ms
        super().__init__(detail or f"Rate limit exceeded for {action_kind}.")


class SubmissionNotFoundError(HeardException):
    """Maps to HTTP 404 Not Found."""
    status_code = 404
    error_code = "not_found"

    def __init__(self, submission_id: str):
        self.submission_id = submission_id
        super().__init__("Submission not found")


class CommentNotFoundError(HeardException):
    """Maps to HTTP 404 Not Found."""
    status_code = 404
    error_code = "not_found"

    def __init__(self, comment_id: str, message: str = "Comment not found"):
        self.comment_id = comment_id
        super().__init__(message)


class InvalidReplyError(HeardException):
    """Raised when a reply targets a comment it may not reply to.

    Comments nest at most two levels, and a reply must belong to the same
    submission as its parent.

    Maps to HTTP 400 Bad Request.
    """
    status_code = 400
    error_code = "invalid_reply"
