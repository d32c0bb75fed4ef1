"""Record schema versions and the migrations between them.

Each migration turns a whole record list of version ``n`` into version
``n + 1``. Migrations never reject a record; missing fields get defaults.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from .datemath import parse_date, parse_months
from .models import SUB_CATEGORIES, UNNAMED_PRODUCT
from .records import new_id, timestamp

logger = logging.getLogger(__name__)

RECORD_SCHEMA_VERSION = 2

_KEY_PREFIX = "skincare_products_v"


def storage_key(version: int) -> str:
    """Key under which records of the given schema version are persisted."""
    return f"{_KEY_PREFIX}{version}"


def _split_category(category) -> tuple[str, str]:
    # Legacy values are matched exactly; anything else is plain skincare.
    if category == "makeup":
        return "makeup", ""
    if category in SUB_CATEGORIES:
        return "skincare", category
    return "skincare", "skincare"


def _legacy_date(value) -> str | None:
    d = parse_date(value)
    return d.isoformat() if d else None


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def migrate_v1_record(raw: dict, *, now: datetime | None = None) -> dict:
    """Map a version-1 record (flat ``category``, ``name``) to version 2."""
    main, sub = _split_category(raw.get("category"))
    name = raw.get("name")
    name = name.strip() if isinstance(name, str) else ""
    stamp = timestamp(now)
    return {
        "id": _text(raw.get("id")) or new_id(),
        "productName": name or UNNAMED_PRODUCT,
        "brandName": "",
        "mainCategory": main,
        "subCategory": sub,
        "expiryDate": _legacy_date(raw.get("expiryDate")),
        "manufacturingDate": "",
        "openingDate": _legacy_date(raw.get("openingDate")),
        "weight": _text(raw.get("weight")),
        "price": "",
        "paoMonths": parse_months(raw.get("paoMonths")),
        "imageData": _text(raw.get("imageData")),
        "createdAt": raw.get("createdAt") or stamp,
        "updatedAt": raw.get("updatedAt") or stamp,
    }


def _v1_to_v2(records: list, now: datetime | None) -> list[dict]:
    return [
        migrate_v1_record(r if isinstance(r, dict) else {}, now=now)
        for r in records
    ]


# from_version -> migration to from_version + 1
MIGRATIONS: dict[int, Callable[[list, datetime | None], list[dict]]] = {
    1: _v1_to_v2,
}


def migrate(
    records: list,
    from_version: int,
    *,
    to_version: int = RECORD_SCHEMA_VERSION,
    now: datetime | None = None,
) -> list[dict]:
    """Run the migration chain from ``from_version`` up to ``to_version``.

    Raises:
        ValueError: If no migration exists for one of the steps.
    """
    version = from_version
    while version < to_version:
        step = MIGRATIONS.get(version)
        if step is None:
            raise ValueError(f"No migration from schema version {version}")
        records = step(records, now)
        logger.info(
            "Migrated %d record(s) from schema v%d to v%d",
            len(records), version, version + 1,
        )
        version += 1
    return records


def is_legacy_record(raw: dict) -> bool:
    """True for version-1 shaped records."""
    return "productName" not in raw and ("name" in raw or "category" in raw)
