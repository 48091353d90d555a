"""
Collaborators shared by the store: the clock and the post id generator.
"""

from datetime import datetime, timezone
import uuid


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_post_id() -> str:
    # random uuid4; collisions are not retried
    return str(uuid.uuid4())


def ensure_utc(value: datetime) -> datetime:
    """
    Convert an offset-aware datetime to UTC.
    Naive values are rejected since the stored format always carries an offset.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("timestamp must carry a UTC offset")
    return value.astimezone(timezone.utc)
