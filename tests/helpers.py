"""Helpers shared by the API tests."""

from fastapi.testclient import TestClient


class FakeClock:
    """Manually advanced millisecond clock for rate limiter tests."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


def sqlite_url(path) -> str:
    # SQLAlchemy expects 4 slashes for absolute paths
    return f"sqlite+aiosqlite:////{str(path).lstrip('/')}"


VALID_CONTENT = (
    "Our pastor announced a building fund and then refused to share "
    "any of the budget with the congregation for three years."
)


def make_submission(client: TestClient, ip: str = "203.0.113.10", **overrides) -> dict:
    payload = {
        "content": VALID_CONTENT,
        "category": "financial",
        "timeframe": "last_year",
        "denomination": "Baptist",
    }
    payload.update(overrides)
    resp = client.post(
        "/api/submissions", json=payload, headers={"X-Forwarded-For": ip}
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
