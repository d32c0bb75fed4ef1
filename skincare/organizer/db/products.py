"""Persisted product record set with schema migration on load."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from ..migrations import RECORD_SCHEMA_VERSION, migrate, storage_key
from ..models import ProductForm
from ..reconcile import MergeMode, export_json, parse_import, reconcile
from ..records import (
    create_record,
    find_record,
    remove_record,
    update_record,
    upsert_record,
)
from .store import DEFAULT_DB_PATH, KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class ProductStore:
    """Loads, migrates and saves the full product list.

    Each mutating call computes the new list, persists it, and returns it.
    The caller's list is never modified.
    """

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        *,
        kv: KeyValueStore | None = None,
    ) -> None:
        self._kv = kv or KeyValueStore(db_path)

    def close(self) -> None:
        self._kv.close()

    def _decode(self, key: str, raw: str, *, strict: bool) -> list | None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            if strict:
                raise StorageError(
                    f"Saved products under {key!r} are unreadable: {e}"
                ) from e
            logger.exception("Failed to parse saved products under %s", key)
            return None
        if not isinstance(data, list):
            if strict:
                raise StorageError(f"Saved products under {key!r} are not a list")
            logger.error("Saved products under %s are not a list", key)
            return None
        return data

    def load(
        self, *, now: datetime | None = None, strict: bool = False
    ) -> list[dict]:
        """Return the current record set, migrating legacy data if needed.

        Migrated records are written under the current key; legacy keys are
        left in place. An unreadable stored set reads as empty, or raises
        StorageError when ``strict`` is set. Mutations load strictly so they
        never write over data they could not read.
        """
        current_key = storage_key(RECORD_SCHEMA_VERSION)
        raw = self._kv.get(current_key)
        if raw is not None:
            return self._decode(current_key, raw, strict=strict) or []

        for version in range(RECORD_SCHEMA_VERSION - 1, 0, -1):
            legacy_key = storage_key(version)
            raw = self._kv.get(legacy_key)
            if raw is None:
                continue
            legacy = self._decode(legacy_key, raw, strict=strict)
            if legacy is None:
                return []
            logger.info(
                "Found %d record(s) under legacy key %s", len(legacy), legacy_key
            )
            records = migrate(legacy, version, now=now)
            self.save(records)
            return records

        return []

    def save(self, records: list[dict]) -> None:
        """Persist the whole set under the current key.

        Raises:
            StorageError: If the write fails.
        """
        self._kv.set(storage_key(RECORD_SCHEMA_VERSION), export_json(records))

    def add(self, form: ProductForm, *, now: datetime | None = None) -> dict:
        """Create a record from the form and persist it. Returns the record."""
        record = create_record(form, now=now)
        self.save(upsert_record(self.load(now=now, strict=True), record))
        logger.info("Added product %s (%s)", record["id"], record["productName"])
        return record

    def update(
        self, record_id: str, form: ProductForm, *, now: datetime | None = None
    ) -> dict:
        """Replace an existing record's fields.

        Raises:
            KeyError: If no record has the given id.
        """
        records = self.load(now=now, strict=True)
        existing = find_record(records, record_id)
        if existing is None:
            raise KeyError(record_id)
        record = update_record(existing, form, now=now)
        self.save(upsert_record(records, record))
        return record

    def get(self, record_id: str) -> dict | None:
        return find_record(self.load(), record_id)

    def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        records = self.load(strict=True)
        remaining = remove_record(records, record_id)
        if len(remaining) == len(records):
            return False
        self.save(remaining)
        logger.info("Deleted product %s", record_id)
        return True

    def import_text(
        self,
        text: str,
        mode: MergeMode | str = MergeMode.MERGE,
        *,
        now: datetime | None = None,
    ) -> list[dict]:
        """Apply an imported backup and persist the result.

        Raises:
            ImportFormatError: If the payload is malformed. Nothing is saved.
        """
        imported = parse_import(text, now=now)
        merged = reconcile(self.load(now=now, strict=True), imported, mode)
        self.save(merged)
        logger.info(
            "Imported %d record(s) in %s mode; %d total",
            len(imported), MergeMode(mode).value, len(merged),
        )
        return merged

    def export_text(self) -> str:
        return export_json(self.load())
