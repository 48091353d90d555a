"""
JSON file persistence for the Users/Posts document.

Every call reads or rewrites the whole file. Writes go through a sibling
temporary file that is renamed over the target, and all cycles on the same
path share one in-process lock (see ``path_lock``).
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import logging
import os
import threading
import weakref

from pydantic import ValidationError

from jsondb.domain.models import Document

logger = logging.getLogger(__name__)

# entries disappear once no JsonStorage holds the lock
_locks: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()


class StorageError(Exception):
    """Base class for document encode/decode failures."""


class DecodeError(StorageError):
    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class EncodeError(StorageError):
    pass


def path_lock(path: Path) -> threading.RLock:
    """Return the process-wide lock for a document path."""
    key = os.path.abspath(path)
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonStorage:
    """Whole-file load/persist helpers bound to one path. Construction does no I/O."""

    def __init__(self, path: Path | str, *, indent: Optional[int] = None):
        self.path = Path(path)
        self.indent = indent
        self._lock = path_lock(self.path)

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def load(self) -> Document:
        # OSError (missing file, permissions) propagates untouched
        raw = self.path.read_bytes()
        try:
            return Document.model_validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(self.path, _first_error(exc)) from exc

    def persist(self, document: Document) -> None:
        payload = self._encode(document)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with tmp.open("wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Persisted %d users / %d posts to %s", len(document.users), len(document.posts), self.path)

    def ensure_initialized(self) -> bool:
        """
        Create an empty document when the file cannot be read.

        Existing content is left alone even if it is not a valid document;
        that surfaces as a DecodeError on the next load. Returns True when a
        new file was written.
        """
        with self.locked():
            try:
                self.path.read_bytes()
            except OSError:
                self.persist(Document.empty())
                logger.debug("Created empty document at %s", self.path)
                return True
            return False

    def _encode(self, document: Document) -> bytes:
        try:
            return document.model_dump_json(by_alias=True, indent=self.indent).encode("utf-8")
        except (ValueError, TypeError) as exc:
            raise EncodeError(f"could not encode document: {exc}") from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    if err.get("type") == "json_invalid":
        return f"invalid JSON ({err.get('msg')})"
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc or 'document'}: {err.get('msg')}"
