"""Anonymous client identity helpers.

Heard has no accounts. A client is identified by a salted SHA-256 hash of
its IP address, which keys rate limits and deduplicates votes.
"""

import hashlib

from fastapi import Request

# 32 hex chars (128 bits) is plenty for collision resistance
IDENTITY_HASH_LENGTH = 32


def get_client_ip(request: Request) -> str:
    """Return the originating client IP for a request.

    Prefers the first X-Forwarded-For entry (set by the reverse proxy),
    then the socket peer address.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()
        if client_ip:
            return client_ip
    return request.client.host if request.client else "unknown"


def hash_identity(value: str, salt: str) -> str:
    """Hash a raw identifier (usually an IP) into an opaque identity."""
    digest = hashlib.sha256((value + salt).encode()).hexdigest()
    return digest[:IDENTITY_HASH_LENGTH]
