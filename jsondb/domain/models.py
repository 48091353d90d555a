"""Pydantic models mirroring the JSON document stored on disk."""
from __future__ import annotations

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jsondb.core.utils import ensure_utc


class _Record(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class User(_Record):
    """A user keyed by e-mail. The password is stored verbatim (no hashing)."""

    email: str
    password: str
    name: str
    age: int


class Post(_Record):
    id: str
    user_email: str = Field(alias="userEmail")
    text: str


class Document(BaseModel):
    """Root structure: users by e-mail and posts by id."""

    model_config = ConfigDict(strict=True)

    users: Dict[str, User]
    posts: Dict[str, Post]

    @classmethod
    def empty(cls) -> "Document":
        return cls(users={}, posts={})

    @model_validator(mode="after")
    def _keys_match_records(self) -> "Document":
        for email, user in self.users.items():
            if email != user.email:
                raise ValueError(f"user key {email!r} does not match embedded email {user.email!r}")
        for post_id, post in self.posts.items():
            if post_id != post.id:
                raise ValueError(f"post key {post_id!r} does not match embedded id {post.id!r}")
        return self

    def put_user(self, user: User) -> None:
        self.users[user.email] = user

    def put_post(self, post: Post) -> None:
        self.posts[post.id] = post
