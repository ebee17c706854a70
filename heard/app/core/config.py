import json
import math
import re
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _parse_cors_origins(raw: Any) -> list[str]:
    """Accept a JSON list, ``*`` or comma/space separated origins.

    Bare hosts are expanded to both their http and https origins.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.strip()
        if raw.startswith("["):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                raw = raw.strip("[]")
    if isinstance(raw, str):
        raw = re.split(r"[,\s]+", raw)

    origins: list[str] = []
    for item in raw:
        origin = str(item).strip().strip("\"'")
        if not origin:
            continue
        if origin == "*":
            return ["*"]
        if "://" in origin:
            candidates = [origin]
        else:
            candidates = [f"http://{origin}", f"https://{origin}"]
        for candidate in candidates:
            if candidate not in origins:
                origins.append(candidate)
    return origins


DAY_MS = 24 * 60 * 60 * 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables or .env file.
    """

    # Debug mode - enables detailed error responses
    debug: bool = False

    # Database (sqlite+aiosqlite for local runs, postgresql+asyncpg in production)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./heard.db", validation_alias="DATABASE_URL"
    )
    db_pool_size: int = 20
    db_max_overflow: int = 10
    db_pool_recycle: int = 300  # seconds

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "text"  # text | structured | json

    # CORS settings
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    # Salt mixed into client IPs before hashing them into identities
    ip_hash_salt: str = "sanctuary-salt"

    # Rate limiting (fixed window, per hashed client IP)
    rate_limit_submissions_max: int = 5
    rate_limit_submissions_window_ms: int = DAY_MS
    rate_limit_votes_max: int = 50
    rate_limit_votes_window_ms: int = DAY_MS

    # Comment ranking
    wilson_confidence: float = 0.95

    @field_validator("cors_origins", mode="before")
    @classmethod
    def decode_cors_origins(cls, v: Any) -> list[str]:
        return _parse_cors_origins(v)

    @field_validator("rate_limit_submissions_max", "rate_limit_votes_max")
    @classmethod
    def validate_rate_limit_positive(cls, v: int) -> int:
        """Validate rate limit maxima are positive."""
        if v < 1:
            raise ValueError("Rate limit values must be at least 1")
        return v

    @field_validator("rate_limit_submissions_window_ms", "rate_limit_votes_window_ms")
    @classmethod
    def validate_window_positive(cls, v: int) -> int:
        """Validate rate limit windows are positive."""
        if v < 1:
            raise ValueError("Rate limit windows must be at least 1 ms")
        return v

    @field_validator("db_pool_size", "db_max_overflow")
    @classmethod
    def validate_pool_size_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("pool size values must be at least 1")
        return v

    @field_validator("wilson_confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not math.isfinite(v) or not 0 < v < 1:
            raise ValueError("wilson_confidence must be between 0 and 1 (exclusive)")
        return v

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.database_url.lower()

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )


# Global settings instance
settings = Settings()
