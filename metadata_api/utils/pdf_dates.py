from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from metadata_api.core.errors import InvalidDate

_PDF_DATE = re.compile(r"^D:(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})")


def parse_pdf_date(value: object) -> Optional[datetime]:
    """
    Parse a legacy PDF date string (``D:YYYYMMDDHHmmSS``) as a UTC instant.

    Anything after the seconds (timezone, fractions) is ignored. Strings that
    do not match, or that name an impossible calendar date, give ``None``.
    """
    if not value or not isinstance(value, str):
        return None
    match = _PDF_DATE.match(value)
    if not match:
        return None
    year, month, day, hour, minute, second = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError:
        return None


def to_iso(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. ``2023-06-15T12:00:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


def format_pdf_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("D:%Y%m%d%H%M%S") + "+00'00'"


def parse_input_date(value: str) -> datetime:
    """Parse a user supplied date (ISO-8601 or ``D:`` form) into a UTC instant."""
    text = (value or "").strip()
    if not text:
        raise InvalidDate("Invalid date: empty value")

    legacy = parse_pdf_date(text)
    if legacy is not None:
        return legacy

    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        raise InvalidDate(f"Invalid date: {value!r}") from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
