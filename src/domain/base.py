import secrets
from datetime import UTC, datetime
from typing import Optional

from config import ApplicationConfig

# 128 bits
MIN_TOKEN_BYTES = 16


def utc_now() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def generate_token(nbytes: Optional[int] = None) -> str:
    """URL-safe token from the OS CSPRNG (default 32 bytes, never below 16)."""
    return secrets.token_urlsafe(max(nbytes or ApplicationConfig.TOKEN_BYTES, MIN_TOKEN_BYTES))
