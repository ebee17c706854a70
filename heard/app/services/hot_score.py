"""Time-decayed activity ranking for the submission feed.

A submission's heat is its total vote count divided by
``(age_hours + 2) ** 1.5``, so engagement lifts a post and age lets it sink.
"""

from datetime import datetime, timezone
from typing import Optional

GRAVITY = 1.5
AGE_OFFSET_HOURS = 2


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def hot_score(
    condemn_count: int,
    absolve_count: int,
    created_at: datetime,
    now: Optional[datetime] = None,
) -> float:
    now = _as_utc(now or datetime.now(timezone.utc))
    age_hours = max(0.0, (now - _as_utc(created_at)).total_seconds() / 3600)
    return (condemn_count + absolve_count) / (age_hours + AGE_OFFSET_HOURS) ** GRAVITY
