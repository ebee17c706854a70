import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from heard.app.db.base import Base

CATEGORIES = ("leadership", "financial", "culture", "misconduct", "spiritual_abuse", "other")
TIMEFRAMES = ("last_month", "last_year", "one_to_five_years", "five_plus_years")
STATUSES = ("active", "under_review", "removed")
SUBMISSION_VOTE_TYPES = ("condemn", "absolve")
COMMENT_VOTE_TYPES = ("upvote", "downvote")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Submission(Base):
    """An anonymously shared church experience."""

    __tablename__ = "submissions"
    __table_args__ = (
        Index("idx_submissions_status_created", "status", "created_at"),
        Index("idx_submissions_category", "category"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(32))  # one of CATEGORIES
    timeframe: Mapped[str] = mapped_column(String(32))  # one of TIMEFRAMES
    denomination: Mapped[str | None] = mapped_column(String(100), nullable=True)
    church_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    pastor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    condemn_count: Mapped[int] = mapped_column(Integer, default=0)
    absolve_count: Mapped[int] = mapped_column(Integer, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, category={self.category})>"


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("submission_id", "voter_hash", name="votes_submission_voter_idx"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE")
    )
    vote_type: Mapped[str] = mapped_column(String(16))  # condemn | absolve
    voter_hash: Mapped[str] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Comment(Base):
    """A comment on a submission; replies nest one level deep."""

    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_submission_created", "submission_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    submission_id: Mapped[str] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE")
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text)
    author_hash: Mapped[str] = mapped_column(String(64))
    upvote_count: Mapped[int] = mapped_column(Integer, default=0)
    downvote_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, submission_id={self.submission_id})>"


class CommentVote(Base):
    __tablename__ = "comment_votes"
    __table_args__ = (
        UniqueConstraint("comment_id", "voter_hash", name="comment_votes_comment_voter_idx"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    comment_id: Mapped[str] = mapped_column(ForeignKey("comments.id", ondelete="CASCADE"))
    vote_type: Mapped[str] = mapped_column(String(16))  # upvote | downvote
    voter_hash: Mapped[str] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
