"""Comment endpoints: threaded discussion under a submission.

Comments can be listed by Wilson score (default), newest first or oldest
first. Each listed comment carries its ``wilsonScore`` regardless of order.
"""

from fastapi import APIRouter, Query, status

from heard.app.api.dependencies import ClientIdentityDep, SettingsDep
from heard.app.api.schemas import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    CommentVoteRequest,
    CommentVoteResponse,
)
from heard.app.core.logging import get_logger
from heard.app.db.crud import (
    apply_comment_vote,
    create_comment,
    get_comment,
    get_submission,
    list_comments,
    update_comment_count,
)
from heard.app.db.dependencies import SessionDep
from heard.app.db.models import Comment
from heard.app.exceptions import (
    CommentNotFoundError,
    InvalidReplyError,
    SubmissionNotFoundError,
)
from heard.app.services import wilson_score

router = APIRouter(tags=["comments"])
logger = get_logger(__name__)


def _to_response(comment: Comment, confidence: float) -> CommentResponse:
    result = CommentResponse.model_validate(comment)
    result.wilson_score = wilson_score.lower_bound(
        comment.upvote_count, comment.downvote_count, confidence
    )
    return result


@router.get("/api/submissions/{submission_id}/comments", response_model=CommentListResponse)
async def list_submission_comments(
    submission_id: str,
    session: SessionDep,
    settings: SettingsDep,
    sort_by: str = Query("wilson", alias="sortBy"),
) -> CommentListResponse:
    """List a submission's comments.

    ``sortBy`` is one of ``wilson``, ``newest`` or ``oldest``; any other
    value falls back to ``wilson``.
    """
    if await get_submission(session, submission_id) is None:
        raise SubmissionNotFoundError(submission_id)

    comments = await list_comments(session, submission_id)
    confidence = settings.wilson_confidence

    if sort_by == "newest":
        ordered = sorted(comments, key=lambda c: c.created_at, reverse=True)
    elif sort_by == "oldest":
        ordered = sorted(comments, key=lambda c: c.created_at)
    else:
        ordered = wilson_score.sort_descending(comments, confidence)

    results = []
    for comment, score in wilson_score.annotate(ordered, confidence):
        item = CommentResponse.model_validate(comment)
        item.wilson_score = score
        results.append(item)
    return CommentListResponse(comments=results)


@router.post(
    "/api/submissions/{submission_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_submission_comment(
    submission_id: str,
    data: CommentCreate,
    session: SessionDep,
    settings: SettingsDep,
    identity: ClientIdentityDep,
) -> CommentResponse:
    """Comment on a submission, or reply to a top-level comment."""
    submission = await get_submission(session, submission_id)
    if submission is None:
        raise SubmissionNotFoundError(submission_id)

    if data.parent_id:
        parent = await get_comment(session, data.parent_id)
        if parent is None:
            raise CommentNotFoundError(data.parent_id, "Parent comment not found")
        if parent.submission_id != submission_id:
            raise InvalidReplyError("Parent comment belongs to different submission")
        if parent.parent_id:
            raise InvalidReplyError("Cannot reply to a reply (max 2 levels)")

    comment = await create_comment(
        session,
        submission_id=submission_id,
        content=data.content,
        author_hash=identity,
        parent_id=data.parent_id or None,
    )
    await update_comment_count(session, submission)
    logger.info(f"Comment {comment.id} added to submission {submission_id}")

    return _to_response(comment, settings.wilson_confidence)


@router.post("/api/comments/{comment_id}/vote", response_model=CommentVoteResponse)
async def vote_on_comment(
    comment_id: str,
    data: CommentVoteRequest,
    session: SessionDep,
    settings: SettingsDep,
    identity: ClientIdentityDep,
) -> CommentVoteResponse:
    """Cast, switch or withdraw an up/down vote on a comment."""
    comment = await get_comment(session, comment_id)
    if comment is None:
        raise CommentNotFoundError(comment_id)

    action = await apply_comment_vote(session, comment, identity, data.vote_type)

    return CommentVoteResponse.model_validate(
        {
            **_to_response(comment, settings.wilson_confidence).model_dump(),
            "action": action,
            "current_vote": None if action == "removed" else data.vote_type,
        }
    )
