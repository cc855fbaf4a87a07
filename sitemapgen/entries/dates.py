"""
Normalization of last-modification dates to canonical UTC instants.
"""

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from .types import InvalidDateError


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Tried in order after ISO 8601 parsing fails
DATE_FORMATS = [
    # Fractions other than 3 or 6 digits, which fromisoformat rejects before 3.11
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%B %d, %Y %H:%M:%S",
    "%B %d, %Y %H:%M",
    "%B %d, %Y",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y %H:%M",
    "%b %d, %Y",
    "%d %B %Y %H:%M:%S",
    "%d %B %Y",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%a, %d %b %Y %H:%M:%S %z",
]


def normalize_date(value: Any, assume_tz: tzinfo = timezone.utc) -> str:
    """
    Convert a date-like value into an ISO 8601 UTC string.

    Accepts strings, epoch milliseconds, datetimes and dates. Values without
    an offset are interpreted in ``assume_tz``.

    Args:
        value: Date-like value to normalize
        assume_tz: Timezone for naive values

    Returns:
        Instant rendered as ``YYYY-MM-DDTHH:MM:SS.sssZ``

    Raises:
        InvalidDateError: If the value cannot be read as a valid instant
    """
    instant = to_datetime(value, assume_tz)
    rendered = instant.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def to_datetime(value: Any, assume_tz: tzinfo = timezone.utc) -> datetime:
    """Read a date-like value as a timezone-aware datetime."""
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime.combine(value, time())
    elif isinstance(value, bool):
        raise InvalidDateError(f"Invalid date: {value!r}", value=value)
    elif isinstance(value, (int, float)):
        instant = _from_epoch_millis(value)
    elif isinstance(value, str):
        instant = _parse_date_string(value)
    else:
        raise InvalidDateError(
            f"Unsupported date type: {type(value).__name__}", value=value
        )

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=assume_tz)
    return instant


def _from_epoch_millis(value: float) -> datetime:
    if math.isnan(value) or math.isinf(value):
        raise InvalidDateError(f"Invalid date: {value!r}", value=value)
    try:
        return _EPOCH + timedelta(milliseconds=value)
    except OverflowError as e:
        raise InvalidDateError(f"Date out of range: {value!r}", value=value) from e


def _parse_date_string(value: str) -> datetime:
    text = value.strip()
    if not text:
        raise InvalidDateError("Empty date string", value=value)

    # Older interpreters do not accept the Z suffix
    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    raise InvalidDateError(f"Invalid date: {value!r}", value=value)
