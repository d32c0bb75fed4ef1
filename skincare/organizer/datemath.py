"""Calendar arithmetic for expiry tracking.

All functions work on local calendar dates and return ``None`` instead of
raising when an input is missing or cannot be parsed. ``None`` means
"unknown", never zero.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime

DATE_PLACEHOLDER = "—"


@dataclass(frozen=True)
class MonthsDays:
    months: int
    days: int


def parse_date(value) -> date | None:
    """Coerce a date string, timestamp string, date or datetime to a date.

    Time-of-day is discarded.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    # Compact or otherwise odd timestamps
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_months(value) -> int | None:
    """Parse a PAO month count. Only positive integers are accepted."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        months = value
    elif isinstance(value, str):
        try:
            months = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return months if months > 0 else None


def _today(today) -> date | None:
    if today is None:
        return date.today()
    return parse_date(today)


def add_months(d: date, n: int) -> date:
    """Add ``n`` calendar months, clamping to the target month's last day.

    >>> add_months(date(2023, 1, 31), 1)
    datetime.date(2023, 2, 28)
    """
    index = d.year * 12 + (d.month - 1) + n
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def days_between(target, today=None) -> int | None:
    """Signed day count from today to ``target`` (tomorrow is +1)."""
    target_date = parse_date(target)
    ref = _today(today)
    if target_date is None or ref is None:
        return None
    return (target_date - ref).days


def months_days_between(from_date, to_date) -> MonthsDays | None:
    """Decompose the interval into whole months plus remaining days.

    Both components carry the same sign.
    """
    start = parse_date(from_date)
    end = parse_date(to_date)
    if start is None or end is None:
        return None

    sign = 1
    if end < start:
        start, end = end, start
        sign = -1

    months = (end.year - start.year) * 12 + (end.month - start.month)
    anchor = add_months(start, months)
    if anchor > end:
        months -= 1
        anchor = add_months(start, months)
    days = (end - anchor).days
    return MonthsDays(months=months * sign, days=days * sign)


def pao_expiry_date(opening, pao_months) -> date | None:
    """Expiry derived from the opening date plus the PAO month count."""
    opened = parse_date(opening)
    months = parse_months(pao_months)
    if opened is None or months is None:
        return None
    return add_months(opened, months)


def time_since_opening(opening, today=None) -> int | None:
    """Days elapsed since the product was opened."""
    opened = parse_date(opening)
    ref = _today(today)
    if opened is None or ref is None:
        return None
    return (ref - opened).days


def format_relative_time(target, today=None) -> str | None:
    """Render the distance to ``target`` as e.g. ``"1y 2m 5d left"``.

    Years are 365 days and months 30 days. The day component is always
    present so the result is never empty.
    """
    target_date = parse_date(target)
    ref = _today(today)
    if target_date is None or ref is None:
        return None

    diff = (target_date - ref).days
    total = abs(diff)
    years = total // 365
    months = (total % 365) // 30
    days = total % 30

    parts: list[str] = []
    if years:
        parts.append(f"{years}y")
    if months:
        parts.append(f"{months}m")
    parts.append(f"{days}d")

    suffix = "past" if diff < 0 else "left"
    return f"{' '.join(parts)} {suffix}"


def format_display_date(value) -> str:
    """Format as ``DD/MM/YYYY``; a dash placeholder for missing input."""
    d = parse_date(value)
    if d is None:
        return DATE_PLACEHOLDER
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"
