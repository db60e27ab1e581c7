"""Backend timestamp normalization."""

from datetime import datetime, timezone
from typing import Any, Optional


def parse_backend_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize a backend timestamp to an aware UTC datetime.

    The backend serializes timestamps either as ISO-8601 strings or as arrays
    ``[year, month, day, hour, minute, second, nanoseconds]`` with a 1-based
    month. Arrays may be truncated after the day. Naive values are taken as UTC.

    Args:
        value: Raw timestamp (list, ISO string, datetime or None)

    Returns:
        Aware datetime, or None for a missing value

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (list, tuple)):
        if not 3 <= len(value) <= 7:
            raise ValueError(f"Date array must have 3 to 7 elements, got {len(value)}")
        parts = [int(part) for part in value]
        year, month, day = parts[:3]
        hour, minute, second, nanos = (parts[3:] + [0, 0, 0, 0])[:4]
        parsed = datetime(year, month, day, hour, minute, second, nanos // 1000)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported date value: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
