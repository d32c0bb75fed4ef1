"""Tests for record schema migrations."""

from datetime import datetime, timezone

import pytest

from skincare.organizer.migrations import (
    RECORD_SCHEMA_VERSION,
    is_legacy_record,
    migrate,
    migrate_v1_record,
    storage_key,
)
from skincare.organizer.models import RECORD_FIELDS, UNNAMED_PRODUCT

NOW = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def test_storage_keys():
    assert storage_key(1) == "skincare_products_v1"
    assert storage_key(RECORD_SCHEMA_VERSION) == "skincare_products_v2"


def test_other_category_becomes_skincare():
    migrated = migrate_v1_record({"category": "other", "name": "X"}, now=NOW)
    assert migrated["mainCategory"] == "skincare"
    assert migrated["subCategory"] == "skincare"
    assert migrated["productName"] == "X"


@pytest.mark.parametrize(
    ("category", "main", "sub"),
    [
        ("makeup", "makeup", ""),
        ("skincare", "skincare", "skincare"),
        ("haircare", "skincare", "haircare"),
        ("bodycare", "skincare", "bodycare"),
        ("nails", "skincare", "skincare"),
        (None, "skincare", "skincare"),
        ("Makeup", "skincare", "skincare"),
        (" haircare", "skincare", "skincare"),
        ("BODYCARE", "skincare", "skincare"),
    ],
)
def test_category_split(category, main, sub):
    migrated = migrate_v1_record({"category": category, "name": "n"}, now=NOW)
    assert (migrated["mainCategory"], migrated["subCategory"]) == (main, sub)


def test_full_legacy_record():
    legacy = {
        "id": "1700000000000",
        "name": "Sunscreen",
        "category": "skincare",
        "buyingDate": "2024-01-01",
        "expiryDate": "2025-06-01",
        "openingDate": "2024-02-01",
        "weight": "50 ml",
        "paoMonths": "12",
        "imageData": "data:image/png;base64,AAAA",
        "createdAt": "2024-01-01T10:00:00.000Z",
        "updatedAt": "2024-02-01T10:00:00.000Z",
    }
    migrated = migrate_v1_record(legacy, now=NOW)

    assert set(migrated) == set(RECORD_FIELDS)
    assert migrated["id"] == "1700000000000"
    assert migrated["brandName"] == ""
    assert migrated["manufacturingDate"] == ""
    assert migrated["price"] == ""
    assert migrated["expiryDate"] == "2025-06-01"
    assert migrated["openingDate"] == "2024-02-01"
    assert migrated["paoMonths"] == 12
    assert migrated["weight"] == "50 ml"
    assert migrated["imageData"] == "data:image/png;base64,AAAA"
    assert migrated["createdAt"] == "2024-01-01T10:00:00.000Z"
    assert migrated["updatedAt"] == "2024-02-01T10:00:00.000Z"


def test_missing_fields_get_defaults():
    migrated = migrate_v1_record({}, now=NOW)
    assert migrated["id"]
    assert migrated["productName"] == UNNAMED_PRODUCT
    assert migrated["createdAt"] == "2026-10-18T08:00:00.000Z"
    assert migrated["updatedAt"] == "2026-10-18T08:00:00.000Z"
    assert migrated["expiryDate"] is None
    assert migrated["paoMonths"] is None


def test_migrate_chain():
    records = migrate([{"name": "A", "category": "makeup"}, "junk"], 1, now=NOW)
    assert len(records) == 2
    assert records[0]["mainCategory"] == "makeup"
    assert records[1]["productName"] == UNNAMED_PRODUCT


def test_migrate_current_version_is_noop():
    records = [{"id": "1", "productName": "A"}]
    assert migrate(records, RECORD_SCHEMA_VERSION) is records


def test_migrate_unknown_version():
    with pytest.raises(ValueError, match="No migration"):
        migrate([], 0)


def test_is_legacy_record():
    assert is_legacy_record({"name": "A", "category": "other"})
    assert not is_legacy_record({"productName": "A", "name": "A"})
    assert not is_legacy_record({"id": 1, "createdAt": "A"})
