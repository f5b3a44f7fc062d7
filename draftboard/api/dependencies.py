"""FastAPI dependency providers for the core services.

Each provider returns a process-wide instance built from settings. Tests
swap them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from draftboard.config import get_settings
from draftboard.notifications import NotificationCenter
from draftboard.repositories.posts import PostRepository
from draftboard.services.lifecycle import ImageLifecycleCoordinator
from draftboard.services.post_view import PostViewService
from draftboard.storage.service import StorageService


@lru_cache
def get_storage_service() -> StorageService:
    """Blob store client configured from settings."""
    settings = get_settings()
    return StorageService.from_config(
        settings.get_storage_config(),
        backend=settings.STORAGE_BACKEND.value,
    )


@lru_cache
def get_notification_center() -> NotificationCenter:
    """Shared notification center."""
    return NotificationCenter(default_duration_ms=get_settings().NOTIFICATION_DURATION_MS)


@lru_cache
def get_post_repository() -> PostRepository:
    """Post repository bound to the application session factory."""
    return PostRepository()


def get_coordinator(
    repository: PostRepository = Depends(get_post_repository),
    storage: StorageService = Depends(get_storage_service),
    notifier: NotificationCenter = Depends(get_notification_center),
) -> ImageLifecycleCoordinator:
    """Image lifecycle coordinator for mutations."""
    return ImageLifecycleCoordinator(repository=repository, storage=storage, notifier=notifier)


def get_view_service(
    repository: PostRepository = Depends(get_post_repository),
    storage: StorageService = Depends(get_storage_service),
) -> PostViewService:
    """Post view service for reads."""
    return PostViewService(
        repository=repository,
        storage=storage,
        ttl_seconds=get_settings().SIGNED_URL_TTL_SECONDS,
    )
