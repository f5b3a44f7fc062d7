"""Repositories for draftboard records."""

from draftboard.database import SessionFactory
from draftboard.repositories.posts import PostRepository

__all__ = ["PostRepository", "SessionFactory"]
