"""
Shared column helpers
"""

from datetime import datetime, timezone
from sqlalchemy import DateTime


def utcnow() -> datetime:
    """Current time in UTC, timezone aware"""
    return datetime.now(timezone.utc)


def timestamp_type() -> DateTime:
    return DateTime(timezone=True)
