"""Import, export and reconciliation of record sets."""

from __future__ import annotations

import enum
import json
import logging
from datetime import datetime

from .migrations import is_legacy_record, migrate_v1_record
from .models import RECORD_FIELDS

logger = logging.getLogger(__name__)

BACKUP_FILENAME = "skincare_products_backup.json"


class ImportFormatError(ValueError):
    """The import payload is not a JSON array of product records."""


class MergeMode(str, enum.Enum):
    REPLACE = "replace"
    MERGE = "merge"


def parse_import(text: str, *, now: datetime | None = None) -> list[dict]:
    """Decode and validate an imported backup.

    Version-1 shaped records are upgraded to the current schema.

    Raises:
        ImportFormatError: If the text is not JSON, not an array, or holds
            anything other than objects.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ImportFormatError(f"Failed to import: {e}") from e

    if not isinstance(data, list):
        raise ImportFormatError(
            "Invalid file format: expected array of products."
        )

    records: list[dict] = []
    upgraded = 0
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ImportFormatError(
                f"Invalid file format: item {index} is not a product record."
            )
        if is_legacy_record(item):
            item = migrate_v1_record(item, now=now)
            upgraded += 1
        records.append(item)

    if upgraded:
        logger.info("Upgraded %d legacy record(s) during import", upgraded)
    return records


def reconcile(
    current: list[dict], imported: list[dict], mode: MergeMode | str
) -> list[dict]:
    """Combine the current set with an imported one.

    ``replace`` returns the imported records as they are. ``merge`` keys both
    sets by ``id`` (imported wins) and orders the result newest
    ``createdAt`` first.

    Raises:
        ImportFormatError: If merging and an imported record has no ``id``.
    """
    mode = MergeMode(mode)
    if mode is MergeMode.REPLACE:
        return list(imported)

    for index, record in enumerate(imported):
        if record.get("id") in (None, ""):
            raise ImportFormatError(
                f"Invalid file format: item {index} has no id."
            )

    by_id: dict = {}
    for record in current:
        by_id[record.get("id")] = record
    for record in imported:
        by_id[record["id"]] = record

    return sorted(
        by_id.values(),
        key=lambda r: str(r.get("createdAt") or ""),
        reverse=True,
    )


def _ordered(record: dict) -> dict:
    """Known fields in their canonical order, unknown ones after."""
    ordered = {key: record[key] for key in RECORD_FIELDS if key in record}
    ordered.update((k, v) for k, v in record.items() if k not in ordered)
    return ordered


def export_json(records: list[dict]) -> str:
    return json.dumps(
        [_ordered(r) for r in records], ensure_ascii=False, indent=2
    )
