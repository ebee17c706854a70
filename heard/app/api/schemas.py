"""Request and response schemas for the public API.

JSON bodies use camelCase field names (``voteType``, ``wilsonScore``) to
match the web client; Python code uses snake_case attributes.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Category = Literal["leadership", "financial", "culture", "misconduct", "spiritual_abuse", "other"]
Timeframe = Literal["last_month", "last_year", "one_to_five_years", "five_plus_years"]
SubmissionVoteType = Literal["condemn", "absolve"]
CommentVoteType = Literal["upvote", "downvote"]
VoteActionName = Literal["added", "removed", "changed"]
FeedSortName = Literal["hot", "new"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SubmissionCreate(CamelModel):
    """Schema for sharing a new experience."""

    content: str = Field(
        ..., min_length=50, max_length=2000,
        description="Experience text (50-2000 characters)",
    )
    category: Category
    timeframe: Timeframe
    title: Optional[str] = Field(None, max_length=200)
    denomination: Optional[str] = Field(None, max_length=100)
    church_name: Optional[str] = Field(None, max_length=200)
    pastor_name: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)


class SubmissionResponse(CamelModel):
    id: str
    title: Optional[str]
    content: str
    category: str
    timeframe: str
    denomination: Optional[str]
    church_name: Optional[str]
    pastor_name: Optional[str]
    location: Optional[str]
    condemn_count: int
    absolve_count: int
    comment_count: int
    status: str
    created_at: datetime


class SubmissionListResponse(CamelModel):
    """One page of the feed."""

    submissions: List[SubmissionResponse]
    total: int
    has_more: bool


class SubmissionVoteRequest(CamelModel):
    vote_type: SubmissionVoteType


class SubmissionVoteResponse(SubmissionResponse):
    action: VoteActionName
    current_vote: Optional[SubmissionVoteType]


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=500)
    parent_id: Optional[str] = None


class CommentResponse(CamelModel):
    id: str
    submission_id: str
    parent_id: Optional[str]
    content: str
    upvote_count: int
    downvote_count: int
    created_at: datetime
    wilson_score: float = 0.0


class CommentListResponse(CamelModel):
    comments: List[CommentResponse]


class CommentVoteRequest(CamelModel):
    vote_type: CommentVoteType


class CommentVoteResponse(CommentResponse):
    action: VoteActionName
    current_vote: Optional[CommentVoteType]
