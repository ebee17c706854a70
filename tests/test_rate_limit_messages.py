import pytest

from heard.app.api.dependencies import describe_window, rate_limit_message
from heard.app.core.config import DAY_MS


@pytest.mark.parametrize(
    ("window_ms", "expected"),
    [
        (DAY_MS, "day"),
        (2 * DAY_MS, "2 days"),
        (3_600_000, "hour"),
        (30 * 60_000, "30 minutes"),
        (1000, "second"),
        (1500, "1500 ms"),
    ],
)
def test_describe_window(window_ms, expected):
    assert describe_window(window_ms) == expected


def test_submission_message():
    assert rate_limit_message("submissions", 5, DAY_MS) == (
        "Rate limit exceeded. You can submit up to 5 experiences per day."
    )


def test_vote_message():
    assert rate_limit_message("votes", 50, DAY_MS) == (
        "Rate limit exceeded. You can cast up to 50 votes per day."
    )
