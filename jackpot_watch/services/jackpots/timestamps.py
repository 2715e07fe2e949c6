from __future__ import annotations

from datetime import datetime, timezone


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    value = now or datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
