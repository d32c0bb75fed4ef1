"""Effective expiry resolution and per-product expiry status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from .datemath import (
    MonthsDays,
    days_between,
    format_relative_time,
    months_days_between,
    pao_expiry_date,
    parse_date,
    time_since_opening,
)


def effective_expiry(record: dict) -> date | None:
    """Resolve the expiry used for sorting and alerts.

    An explicit label always wins over the PAO-derived date, even when the
    PAO date is earlier.
    """
    label = parse_date(record.get("expiryDate"))
    if label is not None:
        return label
    return pao_expiry_date(record.get("openingDate"), record.get("paoMonths"))


def sort_by_expiry(records: Iterable[dict]) -> list[dict]:
    """Ascending by effective expiry; records without one go last."""

    def key(record: dict) -> tuple[bool, date]:
        resolved = effective_expiry(record)
        return (resolved is None, resolved or date.min)

    return sorted(records, key=key)


def expiring_within(
    records: Iterable[dict], days: int, today: date | None = None
) -> list[dict]:
    """Records whose effective expiry is on or before ``today + days``.

    Products already past expiry are included.
    """
    if today is None:
        today = date.today()
    limit = today + timedelta(days=days)
    due = []
    for record in records:
        resolved = effective_expiry(record)
        if resolved is not None and resolved <= limit:
            due.append(record)
    return sort_by_expiry(due)


@dataclass
class ExpiryStatus:
    """Everything a list or detail view shows about a product's shelf life."""

    checked_on: date
    days_left: int | None  # explicit label only
    opened_days: int | None
    pao_date: date | None
    pao_left: MonthsDays | None  # clamped at zero
    effective: date | None
    relative: str | None  # for the effective expiry

    @property
    def expired(self) -> bool:
        return self.effective is not None and self.effective < self.checked_on

    @property
    def label(self) -> str | None:
        if self.days_left is None:
            return None
        if self.days_left < 0:
            return f"{abs(self.days_left)}d past"
        return f"{self.days_left}d left"

    @property
    def opened_label(self) -> str | None:
        if self.opened_days is None:
            return None
        return f"{self.opened_days}d since"

    @property
    def pao_label(self) -> str | None:
        if self.pao_left is None:
            return None
        return f"{self.pao_left.months}m {self.pao_left.days}d left"


def expiry_status(record: dict, today: date | None = None) -> ExpiryStatus:
    if today is None:
        today = date.today()

    pao_date = pao_expiry_date(record.get("openingDate"), record.get("paoMonths"))
    pao_left = None
    if pao_date is not None:
        mdd = months_days_between(today, pao_date)
        pao_left = MonthsDays(months=max(0, mdd.months), days=max(0, mdd.days))

    resolved = effective_expiry(record)
    return ExpiryStatus(
        checked_on=today,
        days_left=days_between(record.get("expiryDate"), today=today),
        opened_days=time_since_opening(record.get("openingDate"), today=today),
        pao_date=pao_date,
        pao_left=pao_left,
        effective=resolved,
        relative=format_relative_time(resolved, today=today),
    )
