from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC "now", truncated to the millisecond precision MongoDB stores."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def isoformat(value):
    """ISO-8601 with an explicit UTC offset, or None."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
