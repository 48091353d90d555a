"""Domain schema of the persisted document."""

from .models import Document, Post, User

__all__ = ["Document", "Post", "User"]
