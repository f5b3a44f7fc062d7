"""Domain errors shared by the repository, coordinator and API layers.

``StorageOrphanWarning`` is a warning category, not an exception the core
raises: it is emitted through :mod:`warnings` and the orphan logger when a
blob outlives the record that referenced it.
"""

from __future__ import annotations


class DraftboardError(Exception):
    """Base class for draftboard domain errors."""


class ValidationError(DraftboardError):
    """Bad input, e.g. an empty title. Never retried."""


class NotFound(DraftboardError):
    """No post with the given id is owned by the caller."""

    def __init__(self, post_id: str) -> None:
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id


class BackendUnavailable(DraftboardError):
    """Database or blob store transport failure."""

    def __init__(self, operation: str, error: BaseException | None = None) -> None:
        message = f"Backend unavailable during {operation}"
        if error is not None:
            message = f"{message}: {error}"
        super().__init__(message)
        self.operation = operation


class OwnerRequired(DraftboardError):
    """An operation was attempted before an owner id was available."""


class StorageOrphanWarning(UserWarning):
    """A blob could not be deleted after its record change was committed."""
