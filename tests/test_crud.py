import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from heard.app.db.async_session import create_session_maker, init_database
from heard.app.db.crud import (
    apply_comment_vote,
    apply_submission_vote,
    create_comment,
    create_submission,
    list_comments,
    list_submissions,
    update_comment_count,
)
import heard.app.db.crud.comment as comment_crud
import heard.app.db.crud.submission as submission_crud
from heard.app.db.models import CommentVote, Vote
from helpers import VALID_CONTENT, sqlite_url


@pytest_asyncio.fixture
async def session(tmp_path):
    engine = create_async_engine(sqlite_url(tmp_path / "crud.db"))
    await init_database(engine)
    async with create_session_maker(engine)() as session:
        yield session
    await engine.dispose()


@pytest.mark.asyncio
async def test_submission_vote_toggle(session):
    submission = await create_submission(
        session, content=VALID_CONTENT, category="culture", timeframe="last_year"
    )

    assert await apply_submission_vote(session, submission, "voter-a", "condemn") == "added"
    assert await apply_submission_vote(session, submission, "voter-b", "condemn") == "added"
    assert (submission.condemn_count, submission.absolve_count) == (2, 0)

    assert await apply_submission_vote(session, submission, "voter-a", "absolve") == "changed"
    assert (submission.condemn_count, submission.absolve_count) == (1, 1)

    assert await apply_submission_vote(session, submission, "voter-a", "absolve") == "removed"
    assert (submission.condemn_count, submission.absolve_count) == (1, 0)

    votes = (await session.execute(select(Vote))).scalars().all()
    assert [v.voter_hash for v in votes] == ["voter-b"]


@pytest.mark.asyncio
async def test_list_submissions_skips_inactive(session):
    visible = await create_submission(
        session, content=VALID_CONTENT, category="financial", timeframe="last_year"
    )
    hidden = await create_submission(
        session, content=VALID_CONTENT, category="financial", timeframe="last_year"
    )
    hidden.status = "under_review"
    await session.flush()

    result, total = await list_submissions(session)

    assert [s.id for s in result] == [visible.id]
    assert total == 1


@pytest.mark.asyncio
async def test_comments_counted_and_voted(session):
    submission = await create_submission(
        session, content=VALID_CONTENT, category="misconduct", timeframe="last_month"
    )
    first = await create_comment(session, submission.id, "first", author_hash="a")
    await create_comment(session, submission.id, "reply", author_hash="b", parent_id=first.id)
    await update_comment_count(session, submission)

    assert submission.comment_count == 2
    assert [c.content for c in await list_comments(session, submission.id)] == ["first", "reply"]

    assert await apply_comment_vote(session, first, "voter", "upvote") == "added"
    assert (first.upvote_count, first.downvote_count) == (1, 0)
    assert await apply_comment_vote(session, first, "voter", "downvote") == "changed"
    assert (first.upvote_count, first.downvote_count) == (0, 1)


def _stale_first_lookup(monkeypatch, module, name):
    """Make the first vote lookup miss, as if another request had not committed yet."""
    real_lookup = getattr(module, name)
    calls = []

    async def lookup(*args):
        calls.append(args)
        if len(calls) == 1:
            return None
        return await real_lookup(*args)

    monkeypatch.setattr(module, name, lookup)
    return calls


@pytest.mark.asyncio
async def test_submission_vote_recovers_from_concurrent_insert(session, monkeypatch):
    submission = await create_submission(
        session, content=VALID_CONTENT, category="culture", timeframe="last_year"
    )
    session.add(Vote(submission_id=submission.id, vote_type="condemn", voter_hash="racer"))
    await session.commit()
    calls = _stale_first_lookup(monkeypatch, submission_crud, "get_vote")

    action = await apply_submission_vote(session, submission, "racer", "absolve")

    assert action == "changed"
    assert len(calls) == 2
    assert (submission.condemn_count, submission.absolve_count) == (0, 1)
    votes = (await session.execute(select(Vote))).scalars().all()
    assert [(v.voter_hash, v.vote_type) for v in votes] == [("racer", "absolve")]


@pytest.mark.asyncio
async def test_comment_vote_recovers_from_concurrent_insert(session, monkeypatch):
    submission = await create_submission(
        session, content=VALID_CONTENT, category="culture", timeframe="last_year"
    )
    comment = await create_comment(session, submission.id, "first", author_hash="a")
    session.add(CommentVote(comment_id=comment.id, vote_type="upvote", voter_hash="racer"))
    await session.commit()
    _stale_first_lookup(monkeypatch, comment_crud, "get_comment_vote")

    action = await apply_comment_vote(session, comment, "racer", "upvote")

    assert action == "removed"
    assert (comment.upvote_count, comment.downvote_count) == (0, 0)
