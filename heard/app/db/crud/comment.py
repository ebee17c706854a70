"""CRUD operations for comments and comment votes."""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from heard.app.db.crud.submission import VoteAction
from heard.app.db.models import Comment, CommentVote, Submission


async def create_comment(
    session: AsyncSession,
    submission_id: str,
    content: str,
    author_hash: str,
    parent_id: Optional[str] = None,
) -> Comment:
    comment = Comment(
        submission_id=submission_id,
        content=content,
        author_hash=author_hash,
        parent_id=parent_id,
        upvote_count=0,
        downvote_count=0,
    )
    session.add(comment)
    await session.flush()
    return comment


async def get_comment(session: AsyncSession, comment_id: str) -> Optional[Comment]:
    return await session.get(Comment, comment_id)


async def list_comments(session: AsyncSession, submission_id: str) -> List[Comment]:
    """Return all comments of a submission in creation order."""
    stmt = (
        select(Comment)
        .where(Comment.submission_id == submission_id)
        .order_by(Comment.created_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_comment_count(session: AsyncSession, submission: Submission) -> Submission:
    stmt = select(func.count()).select_from(Comment).where(
        Comment.submission_id == submission.id
    )
    submission.comment_count = (await session.execute(stmt)).scalar_one()
    await session.flush()
    return submission


async def get_comment_vote(
    session: AsyncSession, comment_id: str, voter_hash: str
) -> Optional[CommentVote]:
    stmt = select(CommentVote).where(
        CommentVote.comment_id == comment_id, CommentVote.voter_hash == voter_hash
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def update_comment_vote_counts(session: AsyncSession, comment: Comment) -> Comment:
    """Recount upvotes/downvotes into the comment's counters."""
    stmt = (
        select(CommentVote.vote_type, func.count())
        .where(CommentVote.comment_id == comment.id)
        .group_by(CommentVote.vote_type)
    )
    counts = dict((await session.execute(stmt)).all())
    comment.upvote_count = counts.get("upvote", 0)
    comment.downvote_count = counts.get("downvote", 0)
    await session.flush()
    return comment


async def _toggle_comment_vote(
    session: AsyncSession,
    comment: Comment,
    voter_hash: str,
    vote_type: str,
) -> VoteAction:
    existing = await get_comment_vote(session, comment.id, voter_hash)
    action: VoteAction

    if existing is None:
        session.add(CommentVote(comment_id=comment.id, vote_type=vote_type, voter_hash=voter_hash))
        action = "added"
    elif existing.vote_type == vote_type:
        await session.delete(existing)
        action = "removed"
    else:
        existing.vote_type = vote_type
        action = "changed"

    await session.flush()
    return action


async def apply_comment_vote(
    session: AsyncSession,
    comment: Comment,
    voter_hash: str,
    vote_type: str,
) -> VoteAction:
    """Toggle a voter's up/down vote on a comment (same semantics as submissions)."""
    try:
        action = await _toggle_comment_vote(session, comment, voter_hash, vote_type)
    except IntegrityError:
        # Another request from this voter stored its vote first
        await session.rollback()
        await session.refresh(comment)
        action = await _toggle_comment_vote(session, comment, voter_hash, vote_type)

    await update_comment_vote_counts(session, comment)
    return action
