"""CRUD operations package."""

from heard.app.db.crud.comment import (
    apply_comment_vote,
    create_comment,
    get_comment,
    get_comment_vote,
    list_comments,
    update_comment_count,
    update_comment_vote_counts,
)
from heard.app.db.crud.submission import (
    FeedSort,
    VoteAction,
    apply_submission_vote,
    create_submission,
    get_submission,
    get_vote,
    list_submissions,
    update_vote_counts,
)

__all__ = [
    # Submissions
    "create_submission",
    "get_submission",
    "list_submissions",
    "get_vote",
    "apply_submission_vote",
    "update_vote_counts",
    "VoteAction",
    "FeedSort",
    # Comments
    "create_comment",
    "get_comment",
    "list_comments",
    "update_comment_count",
    "get_comment_vote",
    "apply_comment_vote",
    "update_comment_vote_counts",
]
