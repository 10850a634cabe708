"""Timestamps are stored as naive UTC datetimes."""

from datetime import datetime, timezone


def utcnow():
    """Current UTC time without tzinfo, for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
