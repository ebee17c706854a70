"""API endpoints package for the Heard backend."""

from heard.app.api.comments import router as comments_router
from heard.app.api.submissions import router as submissions_router

__all__ = [
    "comments_router",
    "submissions_router",
]
