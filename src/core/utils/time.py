"""UTC timestamps for registry records and API responses."""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision.

    Example:
        2026-01-15T10:42:31.123+00:00
    """
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")
