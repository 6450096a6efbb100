from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert any datetime to naive UTC (no tzinfo)."""
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware (UTC) for safe arithmetic.
    If None, returns None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def isoformat(dt: datetime | None) -> str | None:
    dt = aware(dt)
    return dt.isoformat() if dt else None
