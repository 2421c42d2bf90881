# wordmate/core/timeutil.py
import datetime as dt


def utc_now() -> dt.datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        dt.datetime: Current UTC datetime with timezone awareness
    """
    return dt.datetime.now(dt.timezone.utc)


def ensure_aware(value: dt.datetime | None) -> dt.datetime | None:
    """Treat naive datetimes coming back from storage as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def isoformat_or_none(value: dt.datetime | None) -> str | None:
    return value.isoformat() if value else None
