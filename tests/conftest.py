"""Shared fixtures for the Heard test suite."""

import pytest
from fastapi.testclient import TestClient

from helpers import FakeClock, sqlite_url
from heard.app.core.config import Settings
from heard.app.main import create_app
from heard.app.services.rate_limit import FixedWindowRateLimiter, rules_from_settings


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=sqlite_url(tmp_path / "heard_test.db"),
        log_level="WARNING",
        rate_limit_submissions_max=5,
        rate_limit_votes_max=50,
    )


@pytest.fixture
def app(test_settings, clock):
    limiter = FixedWindowRateLimiter(rules_from_settings(test_settings), clock=clock)
    return create_app(test_settings, rate_limiter=limiter)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
