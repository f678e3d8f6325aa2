# tests/store/test_memory_store.py
import pytest

from brandpawa.constants import EntityType
from brandpawa.store import InMemoryRecordStore, encode_key, make_key, sort_records


# --- Key helpers ---

def test_make_key_stringifies_parts():
    assert make_key("u1", 3) == ("u1", "3")


@pytest.mark.parametrize("parts", [("u1", ""), ("u/1", "d1")])
def test_make_key_rejects_bad_parts(parts):
    with pytest.raises(ValueError):
        make_key(*parts)


def test_encode_key_joins_with_separator():
    assert encode_key(("u1", "d1")) == "u1/d1"


def test_sort_records_descending_and_missing_first():
    records = [{"n": 2}, {"n": None}, {"n": 1}]
    assert [r["n"] for r in sort_records(records, "n")] == [None, 1, 2]
    assert [r["n"] for r in sort_records(records, "-n")] == [2, 1, None]
    assert sort_records(records, None) is records


# --- InMemoryRecordStore ---

def test_get_missing_returns_none():
    store = InMemoryRecordStore()
    assert store.get(EntityType.DIAGNOSTIC_RESULT, ("u1", "d1")) is None


def test_upsert_replaces_whole_record():
    store = InMemoryRecordStore()
    store.upsert(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"), {"a": 1, "b": 2})
    store.upsert(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"), {"a": 3})
    assert store.get(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1")) == {"a": 3}
    assert len(store) == 1


def test_records_are_copied_in_and_out():
    store = InMemoryRecordStore()
    record = {"answers": {"q1": 10}}
    store.upsert(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"), record)
    record["answers"]["q2"] = 5
    loaded = store.get(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"))
    loaded["answers"]["q3"] = 0
    assert store.get(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1")) == {"answers": {"q1": 10}}


def test_entity_types_are_separate_namespaces():
    store = InMemoryRecordStore()
    store.upsert(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"), {"kind": "progress"})
    store.upsert(EntityType.DIAGNOSTIC_RESULT, ("u1", "d1"), {"kind": "result"})
    assert store.get(EntityType.DIAGNOSTIC_PROGRESS, ("u1", "d1"))["kind"] == "progress"
    assert store.get("diagnostic_result", ("u1", "d1"))["kind"] == "result"


def test_delete_reports_whether_anything_was_removed():
    store = InMemoryRecordStore()
    store.upsert(EntityType.DIAGNOSTIC_RESULT, ("u1", "d1"), {})
    assert store.delete(EntityType.DIAGNOSTIC_RESULT, ("u1", "d1")) is True
    assert store.delete(EntityType.DIAGNOSTIC_RESULT, ("u1", "d1")) is False


def test_list_by_key_matches_whole_key_parts():
    store = InMemoryRecordStore()
    store.upsert(EntityType.SCORE_HISTORY, ("u1", "d1", "e1"), {"id": "e1", "at": "2024-01-02"})
    store.upsert(EntityType.SCORE_HISTORY, ("u1", "d1", "e2"), {"id": "e2", "at": "2024-01-01"})
    store.upsert(EntityType.SCORE_HISTORY, ("u1", "d2", "e3"), {"id": "e3", "at": "2024-01-03"})
    store.upsert(EntityType.SCORE_HISTORY, ("u10", "d1", "e4"), {"id": "e4", "at": "2024-01-04"})

    assert [r["id"] for r in store.list_by_key(EntityType.SCORE_HISTORY, ("u1",))] == ["e1", "e2", "e3"]
    assert [r["id"] for r in store.list_by_key(EntityType.SCORE_HISTORY, ("u1", "d1"), order_by="at")] == ["e2", "e1"]
    assert [r["id"] for r in store.list_by_key(EntityType.SCORE_HISTORY, ("u1",), order_by="-at")] == ["e3", "e1", "e2"]
    assert len(store.list_by_key(EntityType.SCORE_HISTORY, ())) == 4
