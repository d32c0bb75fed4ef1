"""Create, edit, search and remove product records.

Records are plain dicts keyed by the persisted camelCase field names. Every
function returns a new value and leaves its inputs untouched.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable

from .datemath import parse_date, parse_months
from .models import (
    MAIN_CATEGORIES,
    SUB_CATEGORIES,
    UNNAMED_PRODUCT,
    ProductForm,
)


def new_id() -> str:
    return uuid.uuid4().hex


def timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, ``Z`` suffixed."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.astimezone()
    utc = now.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _normalize_categories(main: str, sub: str) -> tuple[str, str]:
    main = (main or "").strip().lower()
    sub = (sub or "").strip().lower()
    if main not in MAIN_CATEGORIES:
        raise ValueError(
            f"Unknown main category: {main!r} "
            f"(choose from {', '.join(MAIN_CATEGORIES)})"
        )
    if main != "skincare":
        return main, ""
    if not sub:
        return main, "skincare"
    if sub not in SUB_CATEGORIES:
        raise ValueError(
            f"Unknown sub category: {sub!r} "
            f"(choose from {', '.join(SUB_CATEGORIES)})"
        )
    return main, sub


def _optional_date(value: str) -> str | None:
    d = parse_date(value)
    return d.isoformat() if d else None


def _fields_from_form(form: ProductForm) -> dict:
    main, sub = _normalize_categories(form.main_category, form.sub_category)
    return {
        "productName": form.product_name.strip() or UNNAMED_PRODUCT,
        "brandName": form.brand_name.strip(),
        "mainCategory": main,
        "subCategory": sub,
        "expiryDate": _optional_date(form.expiry_date),
        "manufacturingDate": _optional_date(form.manufacturing_date),
        "openingDate": _optional_date(form.opening_date),
        "weight": form.weight or "",
        "price": form.price or "",
        "paoMonths": parse_months(form.pao_months),
        "imageData": form.image_data or "",
    }


def create_record(
    form: ProductForm,
    *,
    now: datetime | None = None,
    id_factory: Callable[[], str] = new_id,
) -> dict:
    """Build a new record from form values.

    Raises:
        ValueError: If a category is not recognised.
    """
    stamp = timestamp(now)
    return {
        "id": id_factory(),
        **_fields_from_form(form),
        "createdAt": stamp,
        "updatedAt": stamp,
    }


def update_record(
    existing: dict, form: ProductForm, *, now: datetime | None = None
) -> dict:
    """Replace every editable field, keeping ``id`` and ``createdAt``."""
    return {
        "id": existing["id"],
        **_fields_from_form(form),
        "createdAt": existing.get("createdAt") or timestamp(now),
        "updatedAt": timestamp(now),
    }


def form_from_record(record: dict) -> ProductForm:
    """Pre-fill a form with a record's current values."""
    pao = record.get("paoMonths")
    return ProductForm(
        product_name=record.get("productName") or "",
        brand_name=record.get("brandName") or "",
        main_category=record.get("mainCategory") or "skincare",
        sub_category=record.get("subCategory") or "",
        expiry_date=record.get("expiryDate") or "",
        manufacturing_date=record.get("manufacturingDate") or "",
        opening_date=record.get("openingDate") or "",
        weight=record.get("weight") or "",
        price=record.get("price") or "",
        pao_months="" if pao in (None, "") else str(pao),
        image_data=record.get("imageData") or "",
    )


def find_record(records: Iterable[dict], record_id: str) -> dict | None:
    for record in records:
        if record.get("id") == record_id:
            return record
    return None


def upsert_record(records: list[dict], record: dict) -> list[dict]:
    """Replace the record with the same id, or prepend a new one."""
    if find_record(records, record["id"]) is None:
        return [record, *records]
    return [record if r.get("id") == record["id"] else r for r in records]


def remove_record(records: list[dict], record_id: str) -> list[dict]:
    return [r for r in records if r.get("id") != record_id]


def filter_records(
    records: Iterable[dict], query: str = "", category: str = "all"
) -> list[dict]:
    """Search by name, brand or category and filter by category.

    ``category`` matches either the main or the sub category.
    """
    q = (query or "").strip().lower()
    result: list[dict] = []
    for record in records:
        main = (record.get("mainCategory") or "").lower()
        sub = (record.get("subCategory") or "").lower()
        if category and category != "all" and category not in (main, sub):
            continue
        if q:
            haystack = [
                (record.get("productName") or "").lower(),
                (record.get("brandName") or "").lower(),
                main,
                sub,
            ]
            if not any(q in field for field in haystack):
                continue
        result.append(record)
    return result
