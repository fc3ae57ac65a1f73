"""Tests for the decision store adapters."""

import json
from datetime import UTC, datetime

import pytest

from stockroom.replenishment.request import OrderRequest, RequestStatus
from stockroom.replenishment.store import get_decision_store, reset_decision_store
from stockroom.replenishment.store.json_file import JsonFileDecisionStore
from stockroom.replenishment.store.memory import InMemoryDecisionStore


def _request(sku_id, status=RequestStatus.PENDING):
    return OrderRequest(
        id=sku_id,
        item=f"Item {sku_id}",
        quantity=1,
        detected_at=datetime(2025, 3, 1, tzinfo=UTC),
        status=status,
    )


class TestJsonFileDecisionStore:
    def test_round_trip_preserves_order_and_decisions(self, tmp_path):
        store = JsonFileDecisionStore(tmp_path / "worklist.json")
        approved = _request("a", RequestStatus.APPROVED).model_copy(
            update={"approved_quantity": 12, "approved_at": datetime(2025, 3, 2, tzinfo=UTC)}
        )
        store.save([approved, _request("b")])

        reloaded = JsonFileDecisionStore(tmp_path / "worklist.json").load()
        assert [request.id for request in reloaded] == ["a", "b"]
        assert reloaded[0].status == RequestStatus.APPROVED
        assert reloaded[0].approved_quantity == 12

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileDecisionStore(tmp_path / "absent.json").load() == []

    def test_creates_parent_directories(self, tmp_path):
        store = JsonFileDecisionStore(tmp_path / "nested" / "dir" / "worklist.json")
        store.save([_request("a")])
        assert (tmp_path / "nested" / "dir" / "worklist.json").exists()
        assert not (tmp_path / "nested" / "dir" / "worklist.json.tmp").exists()

    def test_corrupt_file_is_discarded(self, tmp_path):
        path = tmp_path / "worklist.json"
        path.write_text("{ definitely not json", encoding="utf-8")
        assert JsonFileDecisionStore(path).load() == []

    def test_non_list_document_is_discarded(self, tmp_path):
        path = tmp_path / "worklist.json"
        path.write_text(json.dumps({"a": 1}), encoding="utf-8")
        assert JsonFileDecisionStore(path).load() == []

    def test_corrupt_entries_are_skipped(self, tmp_path):
        path = tmp_path / "worklist.json"
        good = _request("a").model_dump(mode="json")
        path.write_text(json.dumps([good, {"id": "b", "status": "maybe"}, "junk"]), encoding="utf-8")
        assert [request.id for request in JsonFileDecisionStore(path).load()] == ["a"]


class TestInMemoryDecisionStore:
    def test_returns_copies(self):
        store = InMemoryDecisionStore()
        store.save([_request("a")])
        loaded = store.load()
        loaded[0].quantity = 99
        assert store.load()[0].quantity == 1

    def test_clear(self):
        store = InMemoryDecisionStore([_request("a")])
        store.clear()
        assert store.load() == []


class TestStoreSelection:
    def test_test_configuration_uses_memory_store(self):
        reset_decision_store()
        assert isinstance(get_decision_store(), InMemoryDecisionStore)
        assert get_decision_store() is get_decision_store()

    def test_unknown_adapter(self, monkeypatch):
        from stockroom.config import Config

        monkeypatch.setattr("stockroom.replenishment.store.settings", lambda: Config(env="test", decision_store="redis"))
        reset_decision_store()
        with pytest.raises(ValueError, match="redis"):
            get_decision_store()
