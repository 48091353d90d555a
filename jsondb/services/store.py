"""
User and post operations over the JSON document.

Each public method is one full cycle: load the document, apply at most one
mutation, persist. Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from jsondb.core.config import get_settings
from jsondb.core.utils import new_post_id, utc_now
from jsondb.domain.models import Post, User
from jsondb.repositories.json_storage import JsonStorage


class StoreError(Exception):
    """Base class for store domain failures."""


class NotFoundError(StoreError):
    pass


class UserNotFoundError(NotFoundError):
    def __init__(self, email: str):
        super().__init__("user doesn't exist")
        self.email = email


@dataclass
class Store:
    """CRUD over the users/posts document at ``path``. Construction performs no I/O."""

    path: Path
    indent: Optional[int] = None
    clock: Callable[[], datetime] = field(default=utc_now, repr=False)
    id_factory: Callable[[], str] = field(default=new_post_id, repr=False)

    def __post_init__(self):
        self.path = Path(self.path)
        self.storage = JsonStorage(self.path, indent=self.indent)

    @classmethod
    def from_settings(cls) -> "Store":
        settings = get_settings()
        return cls(settings.database_path, indent=settings.json_indent)

    def ensure_initialized(self) -> None:
        self.storage.ensure_initialized()

    # -------------------------------------- users --------------------------------------
    def create_user(self, email: str, password: str, name: str, age: int) -> User:
        """Insert a user, silently replacing any existing one with the same e-mail."""
        with self.storage.locked():
            db = self.storage.load()
            user = User(created_at=self.clock(), email=email, password=password, name=name, age=age)
            db.put_user(user)
            self.storage.persist(db)
            return user

    def update_user(self, email: str, password: str, name: str, age: int) -> User:
        """Replace password/name/age of an existing user; e-mail and created_at are kept."""
        with self.storage.locked():
            db = self.storage.load()
            current = db.users.get(email)
            if current is None:
                raise UserNotFoundError(email)
            user = User(
                created_at=current.created_at,
                email=current.email,
                password=password,
                name=name,
                age=age,
            )
            db.put_user(user)
            self.storage.persist(db)
            return user

    def get_user(self, email: str) -> User:
        with self.storage.locked():
            db = self.storage.load()
        user = db.users.get(email)
        if user is None:
            raise UserNotFoundError(email)
        return user

    def delete_user(self, email: str) -> None:
        # posts of the user are kept (no cascade)
        with self.storage.locked():
            db = self.storage.load()
            db.users.pop(email, None)
            self.storage.persist(db)

    # -------------------------------------- posts --------------------------------------
    def create_post(self, user_email: str, text: str) -> Post:
        with self.storage.locked():
            db = self.storage.load()
            if user_email not in db.users:
                raise UserNotFoundError(user_email)
            post = Post(id=self.id_factory(), created_at=self.clock(), user_email=user_email, text=text)
            db.put_post(post)
            self.storage.persist(db)
            return post

    def get_posts(self, user_email: str) -> List[Post]:
        """All posts written by ``user_email``; empty when there are none or the user is unknown."""
        with self.storage.locked():
            db = self.storage.load()
        return [post for post in db.posts.values() if post.user_email == user_email]

    def delete_post(self, post_id: str) -> None:
        with self.storage.locked():
            db = self.storage.load()
            db.posts.pop(post_id, None)
            self.storage.persist(db)
