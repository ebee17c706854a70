"""Submission endpoints: share, browse and vote on experiences."""

from typing import Optional

from fastapi import APIRouter, Query, Request, Response, status

from heard.app.api.dependencies import (
    ClientIdentityDep,
    RateLimiterDep,
    enforce_rate_limit,
)
from heard.app.api.schemas import (
    Category,
    FeedSortName,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionVoteRequest,
    SubmissionVoteResponse,
)
from heard.app.core.logging import get_logger
from heard.app.db.crud import (
    apply_submission_vote,
    create_submission,
    get_submission,
    list_submissions,
)
from heard.app.db.dependencies import SessionDep
from heard.app.db.models import Submission
from heard.app.exceptions import SubmissionNotFoundError
from heard.app.services.rate_limit import SUBMISSIONS, VOTES

router = APIRouter(prefix="/api/submissions", tags=["submissions"])
logger = get_logger(__name__)


# Only the creation response echoes these back; every read blanks them
IDENTIFYING_FIELDS = ("church_name", "pastor_name", "location")


def public_view(submission: Submission) -> SubmissionResponse:
    """Serialize a submission with its identifying details removed."""
    return SubmissionResponse.model_validate(submission).model_copy(
        update=dict.fromkeys(IDENTIFYING_FIELDS)
    )


async def _require_submission(session: SessionDep, submission_id: str) -> Submission:
    submission = await get_submission(session, submission_id)
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    return submission


@router.get("", response_model=SubmissionListResponse)
async def list_experiences(
    session: SessionDep,
    category: Optional[Category] = None,
    denomination: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=200),
    sort: FeedSortName = "hot",
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> SubmissionListResponse:
    """One page of the active feed, hottest first unless ``sort=new``."""
    submissions, total = await list_submissions(
        session,
        category=category,
        denomination=denomination,
        search=search or None,
        sort=sort,
        page=page,
        limit=limit,
    )
    return SubmissionListResponse(
        submissions=[public_view(s) for s in submissions],
        total=total,
        has_more=(page - 1) * limit + len(submissions) < total,
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_experience(submission_id: str, session: SessionDep) -> SubmissionResponse:
    return public_view(await _require_submission(session, submission_id))

@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def create_experience(
    data: SubmissionCreate,
    request: Request,
    response: Response,
    session: SessionDep,
    limiter: RateLimiterDep,
    identity: ClientIdentityDep,
) -> Submission:
    """Share a new experience.

    Limited per client to a fixed number of submissions per window; the
    remaining allowance is returned in ``X-RateLimit-Remaining``.
    """
    quota = enforce_rate_limit(request, limiter, identity, SUBMISSIONS)

    submission = await create_submission(
        session,
        content=data.content,
        category=data.category,
        timeframe=data.timeframe,
        title=data.title,
        denomination=data.denomination,
        church_name=data.church_name,
        pastor_name=data.pastor_name,
        location=data.location,
    )
    logger.info(f"Submission created: {submission.id} ({submission.category})")

    response.headers["X-RateLimit-Remaining"] = str(quota.remaining)
    return submission


@router.post("/{submission_id}/vote", response_model=SubmissionVoteResponse)
async def vote_on_experience(
    submission_id: str,
    data: SubmissionVoteRequest,
    request: Request,
    session: SessionDep,
    limiter: RateLimiterDep,
    identity: ClientIdentityDep,
) -> SubmissionVoteResponse:
    """Cast, switch or withdraw a condemn/absolve vote."""
    enforce_rate_limit(request, limiter, identity, VOTES)

    submission = await _require_submission(session, submission_id)
    action = await apply_submission_vote(session, submission, identity, data.vote_type)

    return SubmissionVoteResponse.model_validate(
        {
            **public_view(submission).model_dump(),
            "action": action,
            "current_vote": None if action == "removed" else data.vote_type,
        }
    )
