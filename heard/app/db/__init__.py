"""Database package: models, sessions and CRUD helpers."""

from heard.app.db.async_session import (
    create_engine_from_settings,
    create_session_maker,
    get_db,
    init_database,
)
from heard.app.db.base import Base
from heard.app.db.models import Comment, CommentVote, Submission, Vote

__all__ = [
    "Base",
    "Submission",
    "Vote",
    "Comment",
    "CommentVote",
    "create_engine_from_settings",
    "create_session_maker",
    "init_database",
    "get_db",
]
