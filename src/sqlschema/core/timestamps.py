"""
UTC timestamp helpers (stdlib-only).

Log rows store their timestamp as ISO-8601 text so the same table layout
works on every backend.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)
