"""Timestamps used across contexts are timezone-aware UTC.

Callers may hand in naive datetimes (read from a form, a CSV import, a test);
those are taken to be UTC already. Aware values in other zones are converted.
"""

from datetime import UTC, datetime

from shared.errors import InvalidInput


def utc_now() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None, field: str = "created_at") -> datetime | None:
    """Return ``value`` as an aware UTC datetime; ``None`` passes through."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise InvalidInput({field: [f"{value!r} is not a datetime"]})
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
