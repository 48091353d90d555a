"""Embedded JSON document store for users and posts."""

from jsondb.domain.models import Post, User
from jsondb.repositories.json_storage import DecodeError, EncodeError, StorageError
from jsondb.services.store import NotFoundError, Store, StoreError, UserNotFoundError

__all__ = [
    "DecodeError",
    "EncodeError",
    "NotFoundError",
    "Post",
    "StorageError",
    "Store",
    "StoreError",
    "User",
    "UserNotFoundError",
]
