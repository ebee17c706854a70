from starlette.requests import Request

from heard.app.core.security import IDENTITY_HASH_LENGTH, get_client_ip, hash_identity


def _request(headers=None, client=("198.51.100.7", 40000)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestGetClientIp:

    def test_first_forwarded_entry_wins(self):
        request = _request({"X-Forwarded-For": "203.0.113.9, 10.0.0.1, 10.0.0.2"})
        assert get_client_ip(request) == "203.0.113.9"

    def test_falls_back_to_peer_address(self):
        assert get_client_ip(_request()) == "198.51.100.7"

    def test_blank_forwarded_header_ignored(self):
        assert get_client_ip(_request({"X-Forwarded-For": " , 10.0.0.1"})) == "198.51.100.7"

    def test_no_client(self):
        assert get_client_ip(_request(client=None)) == "unknown"


class TestHashIdentity:

    def test_deterministic_and_truncated(self):
        first = hash_identity("203.0.113.9", "salt")
        assert first == hash_identity("203.0.113.9", "salt")
        assert len(first) == IDENTITY_HASH_LENGTH
        assert "203.0.113.9" not in first

    def test_salt_changes_identity(self):
        assert hash_identity("203.0.113.9", "a") != hash_identity("203.0.113.9", "b")

    def test_different_ips_differ(self):
        assert hash_identity("203.0.113.9", "salt") != hash_identity("203.0.113.10", "salt")
