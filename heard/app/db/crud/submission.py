"""CRUD operations for submissions and submission votes."""

from datetime import datetime, timezone
from typing import List, Literal, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from heard.app.db.models import Submission, Vote
from heard.app.services.hot_score import hot_score

VoteAction = Literal["added", "removed", "changed"]
FeedSort = Literal["hot", "new"]


async def create_submission(
    session: AsyncSession,
    content: str,
    category: str,
    timeframe: str,
    title: Optional[str] = None,
    denomination: Optional[str] = None,
    church_name: Optional[str] = None,
    pastor_name: Optional[str] = None,
    location: Optional[str] = None,
) -> Submission:
    submission = Submission(
        content=content,
        category=category,
        timeframe=timeframe,
        title=title,
        denomination=denomination,
        church_name=church_name,
        pastor_name=pastor_name,
        location=location,
        condemn_count=0,
        absolve_count=0,
        comment_count=0,
        status="active",
    )
    session.add(submission)
    await session.flush()
    return submission


async def get_submission(session: AsyncSession, submission_id: str) -> Optional[Submission]:
    return await session.get(Submission, submission_id)


async def list_submissions(
    session: AsyncSession,
    category: Optional[str] = None,
    denomination: Optional[str] = None,
    search: Optional[str] = None,
    sort: FeedSort = "hot",
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Submission], int]:
    """List one page of active submissions.

    Args:
        session: Database session
        category: Only return submissions in this category
        denomination: Only return submissions for this denomination
        search: Case-insensitive substring matched against the content,
            church name, pastor name and location
        sort: "hot" ranks by time-decayed vote activity, "new" by creation time
        page: 1-based page number
        limit: Page size

    Returns:
        The page of Submission objects and the total number of matches
    """
    conditions = [Submission.status == "active"]
    if category:
        conditions.append(Submission.category == category)
    if denomination:
        conditions.append(Submission.denomination == denomination)
    if search:
        conditions.append(
            or_(
                Submission.content.icontains(search, autoescape=True),
                Submission.church_name.icontains(search, autoescape=True),
                Submission.pastor_name.icontains(search, autoescape=True),
                Submission.location.icontains(search, autoescape=True),
            )
        )

    count_stmt = select(func.count()).select_from(Submission).where(*conditions)
    total = (await session.execute(count_stmt)).scalar_one()

    offset = (page - 1) * limit
    stmt = select(Submission).where(*conditions).order_by(Submission.created_at.desc())
    if sort == "new":
        result = await session.execute(stmt.limit(limit).offset(offset))
        return list(result.scalars().all()), total

    # Heat depends on the current time and is ranked here;
    # ties keep the newest-first order of the query
    submissions = list((await session.execute(stmt)).scalars().all())
    now = datetime.now(timezone.utc)
    submissions.sort(
        key=lambda s: hot_score(s.condemn_count, s.absolve_count, s.created_at, now),
        reverse=True,
    )
    return submissions[offset:offset + limit], total


async def get_vote(
    session: AsyncSession, submission_id: str, voter_hash: str
) -> Optional[Vote]:
    stmt = select(Vote).where(
        Vote.submission_id == submission_id, Vote.voter_hash == voter_hash
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def update_vote_counts(session: AsyncSession, submission: Submission) -> Submission:
    """Recount condemn/absolve votes into the submission's counters."""
    stmt = (
        select(Vote.vote_type, func.count())
        .where(Vote.submission_id == submission.id)
        .group_by(Vote.vote_type)
    )
    counts = dict((await session.execute(stmt)).all())
    submission.condemn_count = counts.get("condemn", 0)
    submission.absolve_count = counts.get("absolve", 0)
    await session.flush()
    return submission


async def _toggle_vote(
    session: AsyncSession,
    submission: Submission,
    voter_hash: str,
    vote_type: str,
) -> VoteAction:
    existing = await get_vote(session, submission.id, voter_hash)
    action: VoteAction

    if existing is None:
        session.add(Vote(submission_id=submission.id, vote_type=vote_type, voter_hash=voter_hash))
        action = "added"
    elif existing.vote_type == vote_type:
        await session.delete(existing)
        action = "removed"
    else:
        existing.vote_type = vote_type
        action = "changed"

    await session.flush()
    return action


async def apply_submission_vote(
    session: AsyncSession,
    submission: Submission,
    voter_hash: str,
    vote_type: str,
) -> VoteAction:
    """Toggle a voter's vote on a submission.

    Voting the same type again removes the vote; voting the other type
    switches it. Counters are recomputed afterwards.

    If a concurrent request from the same voter inserted its vote first,
    the unique constraint rejects ours. The transaction is then rolled back
    and the toggle re-applied against the stored vote.

    Returns:
        The action taken: "added", "removed" or "changed"
    """
    try:
        action = await _toggle_vote(session, submission, voter_hash, vote_type)
    except IntegrityError:
        await session.rollback()
        await session.refresh(submission)
        action = await _toggle_vote(session, submission, voter_hash, vote_type)

    await update_vote_counts(session, submission)
    return action
