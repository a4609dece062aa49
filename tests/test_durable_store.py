from __future__ import annotations

import json

from quiz_session.core.services import durable_store
from quiz_session.core.services.durable_store import InMemoryStore, JsonFileStore


def test_in_memory_store_basics():
    store = InMemoryStore({"a": "1"})
    assert store.get("a") == "1"
    store.set("b", "2")
    store.remove("a")
    store.remove("missing")
    assert store.get("a") is None
    assert store.keys() == ["b"]


def test_json_file_store_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    store = JsonFileStore(path)
    assert store.get("quiz-started") is None

    store.set("quiz-started", "true")
    store.set("quiz-user", '{"name": "Ayu"}')
    store.remove("quiz-user")

    reopened = JsonFileStore(path)
    assert reopened.get("quiz-started") == "true"
    assert reopened.get("quiz-user") is None
    assert json.loads(path.read_text(encoding="utf-8")) == {"quiz-started": "true"}


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{truncated", encoding="utf-8")
    store = JsonFileStore(path)
    assert store.keys() == []

    store.set("quiz-started", "true")
    assert JsonFileStore(path).get("quiz-started") == "true"


def test_file_with_invalid_utf8_reads_as_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_bytes(b'{"quiz-started": "\xff\xfe"}')
    store = JsonFileStore(path)
    assert store.keys() == []

    store.set("quiz-user", '{"name": "Wulan"}')
    assert JsonFileStore(path).get("quiz-user") == '{"name": "Wulan"}'


def test_failed_write_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("quiz-started", "true")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(durable_store.os, "replace", fail_replace)
    store.set("quiz-user", '{"name": "Wulan"}')
    assert store.get("quiz-user") == '{"name": "Wulan"}'

    monkeypatch.undo()
    assert json.loads(path.read_text(encoding="utf-8")) == {"quiz-started": "true"}
    assert JsonFileStore(path).get("quiz-started") == "true"


def test_writes_leave_no_temp_file_behind(tmp_path):
    path = tmp_path / "storage.json"
    store = JsonFileStore(path)
    store.set("quiz-started", "true")
    store.remove("quiz-started")
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


def test_non_string_values_are_dropped(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"quiz-started": "true", "quiz-state": {"inline": 1}}), encoding="utf-8")
    assert JsonFileStore(path).keys() == ["quiz-started"]

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert JsonFileStore(path).keys() == []
