"""
Tests for the whole-file load/persist mechanics.
"""
from __future__ import annotations

import gc
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Garante que o pacote jsondb seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jsondb.domain.models import Document, User  # noqa: E402
from jsondb.repositories import json_storage  # noqa: E402
from jsondb.repositories.json_storage import DecodeError, EncodeError, JsonStorage, path_lock  # noqa: E402
from jsondb.services.store import Store  # noqa: E402


@pytest.fixture()
def db_file(tmp_path):
    return tmp_path / "db.json"


def test_construction_does_no_io(db_file):
    JsonStorage(db_file)
    assert not db_file.exists()


def test_ensure_initialized_is_idempotent(db_file):
    storage = JsonStorage(db_file)

    assert storage.ensure_initialized() is True
    first = db_file.read_bytes()
    assert json.loads(first) == {"users": {}, "posts": {}}

    assert storage.ensure_initialized() is False
    assert db_file.read_bytes() == first


def test_ensure_initialized_keeps_malformed_content(db_file):
    db_file.write_text("not json at all", encoding="utf-8")
    storage = JsonStorage(db_file)

    assert storage.ensure_initialized() is False
    assert db_file.read_text(encoding="utf-8") == "not json at all"
    with pytest.raises(DecodeError):
        storage.load()


def test_load_missing_file_raises_oserror(db_file):
    with pytest.raises(FileNotFoundError):
        JsonStorage(db_file).load()


@pytest.mark.parametrize(
    "content",
    [
        "",
        "[]",
        '{"users": {}}',
        '{"users": {}, "posts": []}',
        '{"users": {"a@x.com": {"createdAt": "2024-01-01T00:00:00Z", "email": "a@x.com",'
        ' "password": "p", "name": "A", "age": "30"}}, "posts": {}}',
    ],
)
def test_load_rejects_content_not_matching_schema(db_file, content):
    db_file.write_text(content, encoding="utf-8")
    with pytest.raises(DecodeError):
        JsonStorage(db_file).load()


def test_load_rejects_key_that_differs_from_email(db_file):
    db_file.write_text(
        json.dumps(
            {
                "users": {
                    "other@x.com": {
                        "createdAt": "2024-01-01T00:00:00Z",
                        "email": "a@x.com",
                        "password": "p",
                        "name": "A",
                        "age": 30,
                    }
                },
                "posts": {},
            }
        ),
        encoding="utf-8",
    )
    with pytest.raises(DecodeError):
        JsonStorage(db_file).load()


def test_load_rejects_post_key_that_differs_from_id(db_file):
    db_file.write_text(
        json.dumps(
            {
                "users": {},
                "posts": {
                    "post-1": {
                        "id": "post-2",
                        "createdAt": "2024-01-01T00:00:00Z",
                        "userEmail": "a@x.com",
                        "text": "hi",
                    }
                },
            }
        ),
        encoding="utf-8",
    )
    with pytest.raises(DecodeError):
        JsonStorage(db_file).load()


def test_load_accepts_offsets_and_normalizes_to_utc(db_file):
    db_file.write_text(
        json.dumps(
            {
                "users": {
                    "a@x.com": {
                        "createdAt": "2024-01-01T09:00:00-03:00",
                        "email": "a@x.com",
                        "password": "p",
                        "name": "A",
                        "age": 30,
                    }
                },
                "posts": {},
            }
        ),
        encoding="utf-8",
    )
    user = JsonStorage(db_file).load().users["a@x.com"]
    assert user.created_at.utcoffset().total_seconds() == 0
    assert user.created_at.hour == 12


def test_persist_replaces_file_and_leaves_no_temp(db_file):
    storage = JsonStorage(db_file, indent=2)
    storage.ensure_initialized()

    storage.persist(Document.empty())

    assert [p.name for p in db_file.parent.iterdir()] == ["db.json"]
    assert db_file.read_text(encoding="utf-8").startswith("{\n")


def test_persist_into_missing_directory_propagates(tmp_path):
    storage = JsonStorage(tmp_path / "missing" / "db.json")
    with pytest.raises(FileNotFoundError):
        storage.persist(Document.empty())
    assert not (tmp_path / "missing").exists()


def test_path_lock_is_shared_per_path(db_file, tmp_path):
    assert path_lock(db_file) is path_lock(Path(str(db_file)))
    assert path_lock(db_file) is not path_lock(tmp_path / "other.json")


def test_unencodable_text_raises_encode_error_without_writing(db_file):
    store = Store(db_file)
    store.ensure_initialized()
    before = db_file.read_bytes()

    with pytest.raises(EncodeError):
        store.create_user("a@x.com", "p", "\ud800", 3)

    assert db_file.read_bytes() == before
    assert [p.name for p in db_file.parent.iterdir()] == ["db.json"]


def test_failed_replace_removes_temp_and_keeps_original(db_file, monkeypatch):
    storage = JsonStorage(db_file)
    storage.ensure_initialized()
    before = db_file.read_bytes()

    def failing_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", failing_replace)
    document = Document.empty()
    document.put_user(
        User(created_at=datetime(2024, 1, 1, tzinfo=timezone.utc), email="a@x.com", password="p", name="A", age=1)
    )

    with pytest.raises(OSError, match="disk full"):
        storage.persist(document)

    assert db_file.read_bytes() == before
    assert not db_file.with_name("db.json.tmp").exists()


def test_lock_is_dropped_with_last_storage(tmp_path):
    path = tmp_path / "short-lived.json"
    key = os.path.abspath(path)
    first = JsonStorage(path)
    second = JsonStorage(path)
    assert first._lock is second._lock
    assert key in json_storage._locks

    del first, second
    gc.collect()

    assert key not in json_storage._locks
