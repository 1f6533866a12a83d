"""Time utilities for UTC timestamp formatting and parsing."""

from datetime import date, datetime, timezone, tzinfo

from countrystats.errors import MalformedValue


def utc_now_z() -> str:
    """
    Get current UTC time as ISO 8601 string with Z suffix.

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07.804867Z')
    """
    return to_utc_z(datetime.now(timezone.utc))


def to_utc_z(dt: datetime) -> str:
    """
    Convert datetime to ISO 8601 UTC string with Z suffix.

    Args:
        dt: Datetime object (must be timezone-aware)

    Returns:
        ISO 8601 UTC timestamp ending with 'Z' (e.g., '2025-12-23T00:27:07Z')

    Raises:
        ValueError: If datetime is naive (not timezone-aware)
    """
    if dt.tzinfo is None:
        raise ValueError(
            f"Naive datetime not allowed. Got {dt}. "
            "Use datetime.now(timezone.utc) or dt.replace(tzinfo=timezone.utc)"
        )

    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat().replace('+00:00', 'Z')


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value) -> datetime:
    """
    Parse a calendar timestamp into an aware UTC datetime.

    Accepts datetime/date objects and ISO 8601 strings (with or without a
    trailing 'Z'). Date-only strings are midnight UTC.

    Raises:
        MalformedValue: If the value cannot be read as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        raise MalformedValue(f"Not a timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError as e:
        raise MalformedValue(f"Not a timestamp: {value!r}") from e


def calendar_date(value, tz: tzinfo | None = timezone.utc) -> str:
    """
    Render a timestamp as YYYY-MM-DD in the given calendar.

    Args:
        value: Anything parse_timestamp accepts
        tz: Target timezone; None means the host's local timezone

    Raises:
        MalformedValue: If the value cannot be read as a timestamp
    """
    dt = parse_timestamp(value).astimezone(tz)
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
