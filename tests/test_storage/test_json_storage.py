"""
Tests for JSONFileStorage against a real file in a temp directory.
"""
import json
import os
import threading

import pytest

from todo_mcp.exceptions import DatabaseError
from todo_mcp.models import TaskCreate, TaskUpdate, TaskFilter, parse_timestamp
from todo_mcp.storage import JSONFileStorage


def _create(storage, title="Task", **fields):
    return storage.create(TaskCreate(title=title, **fields))


class TestCreate:
    """Tests for create."""

    def test_create_assigns_id_and_defaults(self, storage):
        task = _create(storage, "Buy milk")

        assert task.id
        assert task.title == "Buy milk"
        assert task.completed is False
        assert task.priority == "medium"
        assert task.tags == []
        assert task.created_at == task.updated_at

    def test_create_persists_camel_case_array(self, storage, data_file):
        task = _create(storage, "Write report", description="Q3", due_date="2025-01-31", tags=["work"])

        with open(data_file, encoding="utf-8") as f:
            raw = json.load(f)
        assert isinstance(raw, list)
        assert raw[0]["id"] == task.id
        assert raw[0]["dueDate"] == "2025-01-31"
        assert "createdAt" in raw[0]
        assert "updatedAt" in raw[0]
        assert "due_date" not in raw[0]

    def test_create_leaves_no_temp_files(self, storage, data_file):
        _create(storage, "One")
        _create(storage, "Two")

        assert os.listdir(os.path.dirname(data_file)) == ["todos.json"]

    def test_ids_are_unique(self, storage):
        ids = {_create(storage, f"Task {i}").id for i in range(20)}
        assert len(ids) == 20

    def test_concurrent_creates_are_all_kept(self, storage):
        errors = []

        def worker(n):
            try:
                _create(storage, f"Concurrent {n}")
            except Exception as e:  # collected and asserted below
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        tasks = storage.list()
        assert len(tasks) == 16
        assert len({t.id for t in tasks}) == 16
        assert {t.title for t in tasks} == {f"Concurrent {i}" for i in range(16)}


class TestRead:
    """Tests for get and list."""

    def test_missing_file_is_empty(self, storage, data_file):
        assert not os.path.exists(data_file)
        assert storage.list() == []
        assert storage.get("anything") is None

    def test_get_returns_stored_task(self, storage):
        created = _create(storage, "Find me")
        assert storage.get(created.id) == created

    def test_get_unknown_id(self, storage):
        _create(storage)
        assert storage.get("no-such-id") is None

    def test_list_is_newest_first(self, storage):
        first = _create(storage, "first")
        second = _create(storage, "second")
        third = _create(storage, "third")

        assert [t.id for t in storage.list()] == [third.id, second.id, first.id]

    def test_list_filters_are_conjunctive(self, storage):
        a = _create(storage, "a", priority="high", tags=["work"])
        _create(storage, "b", priority="low", tags=["work"])
        c = _create(storage, "c", priority="high", tags=["home"])
        storage.update(c.id, TaskUpdate(completed=True))

        assert [t.id for t in storage.list(TaskFilter(priority="high"))] == [c.id, a.id]
        assert [t.id for t in storage.list(TaskFilter(priority="high", tag="work"))] == [a.id]
        assert [t.id for t in storage.list(TaskFilter(completed=True))] == [c.id]
        assert storage.list(TaskFilter(tag="garden")) == []

    def test_malformed_file_is_store_failure(self, storage, data_file):
        os.makedirs(os.path.dirname(data_file), exist_ok=True)
        data_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(DatabaseError) as exc_info:
            storage.list()
        assert exc_info.value.operation == "load"

    def test_non_array_file_is_store_failure(self, storage, data_file):
        os.makedirs(os.path.dirname(data_file), exist_ok=True)
        data_file.write_text('{"id": "1"}', encoding="utf-8")

        with pytest.raises(DatabaseError):
            storage.get("1")

    def test_invalid_record_is_store_failure(self, storage, data_file):
        os.makedirs(os.path.dirname(data_file), exist_ok=True)
        data_file.write_text('[{"title": "no id"}]', encoding="utf-8")

        with pytest.raises(DatabaseError):
            storage.list()

    def test_reads_file_written_by_another_instance(self, storage, data_file):
        created = _create(storage, "shared")
        other = JSONFileStorage(str(data_file))
        assert other.get(created.id).title == "shared"


class TestUpdate:
    """Tests for update and complete."""

    def test_update_changes_only_supplied_fields(self, storage):
        task = _create(storage, "Original", description="keep", priority="low", tags=["x"])

        updated = storage.update(task.id, TaskUpdate(title="Renamed"))

        assert updated.title == "Renamed"
        assert updated.description == "keep"
        assert updated.priority == "low"
        assert updated.tags == ["x"]
        assert updated.id == task.id
        assert updated.created_at == task.created_at

    def test_update_advances_updated_at(self, storage):
        task = _create(storage)
        first = storage.update(task.id, TaskUpdate(priority="high"))
        second = storage.update(task.id, TaskUpdate(priority="low"))

        assert parse_timestamp(first.updated_at) > parse_timestamp(task.updated_at)
        assert parse_timestamp(second.updated_at) > parse_timestamp(first.updated_at)

    def test_update_null_clears_description(self, storage):
        task = _create(storage, description="temporary", due_date="2025-05-01")

        updated = storage.update(task.id, TaskUpdate(description=None, due_date=None))

        assert updated.description is None
        assert updated.due_date is None
        assert "description" not in storage.get(task.id).to_dict()

    def test_update_is_persisted(self, storage):
        task = _create(storage)
        storage.update(task.id, TaskUpdate(completed=True))
        assert storage.get(task.id).completed is True

    def test_update_unknown_id(self, storage):
        assert storage.update("missing", TaskUpdate(title="x")) is None

    def test_complete_sets_completed(self, storage):
        task = _create(storage)
        assert storage.complete(task.id).completed is True
        assert storage.complete("missing") is None


class TestDelete:
    """Tests for delete."""

    def test_delete_removes_record(self, storage):
        keep = _create(storage, "keep")
        gone = _create(storage, "gone")

        assert storage.delete(gone.id) is True
        assert storage.get(gone.id) is None
        assert [t.id for t in storage.list()] == [keep.id]

    def test_second_delete_reports_nothing_deleted(self, storage):
        task = _create(storage)
        assert storage.delete(task.id) is True
        assert storage.delete(task.id) is False


class TestSearch:
    """Tests for search."""

    def test_search_is_case_insensitive_over_title_and_description(self, storage):
        by_title = _create(storage, "Buy MILK")
        by_description = _create(storage, "Groceries", description="milk and eggs")
        _create(storage, "Unrelated")

        found = storage.search("Milk")

        assert [t.id for t in found] == [by_description.id, by_title.id]

    def test_search_skips_missing_description(self, storage):
        _create(storage, "No description here")
        assert storage.search("milk") == []

    def test_empty_query_matches_everything(self, storage):
        _create(storage, "a")
        _create(storage, "b")
        assert len(storage.search("")) == 2


def test_ping_fails_on_corrupt_file(storage, data_file):
    storage.ping()
    os.makedirs(os.path.dirname(data_file), exist_ok=True)
    data_file.write_text("garbage", encoding="utf-8")
    with pytest.raises(DatabaseError):
        storage.ping()
