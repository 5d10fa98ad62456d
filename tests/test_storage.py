"""
Tests for the JSON-lines document store.
"""
import json
import logging

import pytest

from decision_matrix.errors import StorageError
from decision_matrix.storage import JsonlDocumentStore, new_id


class TestJsonlDocumentStore:

    def test_create_then_list(self, store):
        doc_id = store.create("decisions", {"decisionName": "Laptop"})

        assert doc_id.startswith("dec_")
        assert store.list_all("decisions") == [(doc_id, {"decisionName": "Laptop"})]

    def test_create_appends_in_order(self, store):
        ids = [store.create("decisions", {"n": i}) for i in range(3)]
        assert [i for i, _ in store.list_all("decisions")] == ids

    def test_ids_are_unique(self):
        assert len({new_id() for _ in range(200)}) == 200

    def test_missing_collection_lists_empty(self, store):
        assert store.list_all("decisions") == []

    def test_collections_are_separate(self, store):
        store.create("decisions", {"a": 1})
        assert store.list_all("other") == []

    def test_delete_is_idempotent(self, store):
        keep = store.create("decisions", {"n": 1})
        gone = store.create("decisions", {"n": 2})

        assert store.delete_by_id("decisions", gone) is True
        assert store.delete_by_id("decisions", gone) is False
        assert [i for i, _ in store.list_all("decisions")] == [keep]

    def test_delete_on_missing_file(self, store):
        assert store.delete_by_id("decisions", "dec_nothing") is False

    def test_corrupt_lines_are_skipped(self, tmp_path, caplog):
        root = tmp_path / "data"
        root.mkdir()
        good = {"id": "dec_1", "data": {"decisionName": "ok"}}
        (root / "decisions.jsonl").write_text(
            json.dumps(good) + "\n{not json\n\n" + json.dumps({"id": "dec_2"}) + "\n",
            encoding="utf-8",
        )
        store = JsonlDocumentStore(str(root))

        with caplog.at_level(logging.WARNING, logger="decision_matrix"):
            rows = store.list_all("decisions")

        assert rows == [("dec_1", {"decisionName": "ok"})]
        assert any("unreadable" in r.getMessage() for r in caplog.records)

    def test_delete_keeps_unreadable_lines(self, tmp_path):
        root = tmp_path / "data"
        root.mkdir()
        path = root / "decisions.jsonl"
        first = {"id": "dec_1", "data": {"decisionName": "keep"}}
        second = {"id": "dec_2", "data": {"decisionName": "drop"}}
        path.write_text(
            json.dumps(first) + "\n{half-written\n" + json.dumps(second) + "\n",
            encoding="utf-8",
        )
        store = JsonlDocumentStore(str(root))

        assert store.delete_by_id("decisions", "dec_2") is True

        assert path.read_text(encoding="utf-8").splitlines() == [json.dumps(first), "{half-written"]
        assert store.list_all("decisions") == [("dec_1", {"decisionName": "keep"})]

    def test_write_failure_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        store = JsonlDocumentStore(str(blocker))

        with pytest.raises(StorageError) as exc:
            store.create("decisions", {"n": 1})
        assert exc.value.operation == "create"
        assert isinstance(exc.value.__cause__, OSError)

    @pytest.mark.parametrize("name", ["", "../escape", ".hidden"])
    def test_rejects_bad_collection_names(self, store, name):
        with pytest.raises(ValueError):
            store.create(name, {})
