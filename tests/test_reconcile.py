"""Tests for import parsing and record set reconciliation."""

import json

import pytest

from skincare.organizer.models import RECORD_FIELDS
from skincare.organizer.reconcile import (
    ImportFormatError,
    MergeMode,
    export_json,
    parse_import,
    reconcile,
)


@pytest.fixture
def current():
    return [
        {"id": "a", "productName": "Toner", "createdAt": "2026-01-01T00:00:00.000Z"},
        {"id": "b", "productName": "Mascara", "createdAt": "2026-03-01T00:00:00.000Z"},
    ]


def test_merge_imported_wins():
    merged = reconcile(
        [{"id": 1, "createdAt": "A"}],
        [{"id": 1, "createdAt": "B"}, {"id": 2, "createdAt": "C"}],
        MergeMode.MERGE,
    )
    assert len(merged) == 2
    assert merged == [{"id": 2, "createdAt": "C"}, {"id": 1, "createdAt": "B"}]


def test_merge_keeps_unmatched_current(current):
    imported = [{"id": "c", "productName": "Perfume", "createdAt": "2026-02-01T00:00:00.000Z"}]
    merged = reconcile(current, imported, "merge")
    assert [r["id"] for r in merged] == ["b", "c", "a"]


def test_merge_requires_ids(current):
    with pytest.raises(ImportFormatError, match="no id"):
        reconcile(current, [{"productName": "No id"}], MergeMode.MERGE)


def test_replace(current):
    imported = [{"id": "z", "createdAt": "X"}]
    assert reconcile(current, imported, MergeMode.REPLACE) == imported


def test_unknown_mode(current):
    with pytest.raises(ValueError):
        reconcile(current, [], "append")


def test_export_then_replace_round_trip(current):
    text = export_json(current)
    restored = reconcile([], parse_import(text), MergeMode.REPLACE)
    assert restored == current


def test_export_is_pretty_and_unicode():
    text = export_json([{"id": "1", "productName": "Crème"}])
    assert "Crème" in text
    assert text.startswith("[\n  {")


def test_export_orders_known_fields_first():
    record = {"custom": 1, "updatedAt": "u", "productName": "Toner", "id": "a"}
    exported = json.loads(export_json([record]))[0]
    assert list(exported) == ["id", "productName", "updatedAt", "custom"]
    assert [k for k in exported if k in RECORD_FIELDS] == [
        k for k in RECORD_FIELDS if k in record
    ]


class TestParseImport:
    def test_invalid_json(self):
        with pytest.raises(ImportFormatError):
            parse_import("{not json")

    def test_not_an_array(self):
        with pytest.raises(ImportFormatError, match="expected array"):
            parse_import(json.dumps({"id": "1"}))

    def test_non_object_items(self):
        with pytest.raises(ImportFormatError, match="item 1"):
            parse_import(json.dumps([{"id": "1"}, 42]))

    def test_empty_array(self):
        assert parse_import("[]") == []

    def test_legacy_records_are_upgraded(self):
        records = parse_import(
            json.dumps([{"id": "1", "name": "Lipstick", "category": "makeup"}])
        )
        assert records[0]["productName"] == "Lipstick"
        assert records[0]["mainCategory"] == "makeup"
        assert records[0]["subCategory"] == ""
        assert records[0]["id"] == "1"
