"""
Pytest configuration and fixtures for Draftboard tests.

Every test runs against an in-memory SQLite database (aiosqlite, shared
through a StaticPool) and the in-memory blob store, so no files or
network services are touched.
"""
import io
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from draftboard.api.dependencies import (
    get_notification_center,
    get_post_repository,
    get_storage_service,
)
from draftboard.auth.context import OwnerContext
from draftboard.auth.jwt_handler import create_access_token
from draftboard.errors import BackendUnavailable
from draftboard.main import app
from draftboard.models import Base, Post
from draftboard.notifications import NotificationCenter
from draftboard.repositories.posts import PostRepository
from draftboard.services.lifecycle import ImageLifecycleCoordinator
from draftboard.services.post_view import PostViewService
from draftboard.storage.backends.memory import MemoryBlobStore
from draftboard.storage.config import StorageConfig
from draftboard.storage.errors import BlobStoreError
from draftboard.storage.service import ImageUpload, StorageService
from draftboard.storage.signing import UrlSigner

logger = logging.getLogger(__name__)

TEST_SECRET = "test-signing-secret"
TEST_BASE_URL = "http://test"


# ============================================
# Test Doubles
# ============================================

class FlakyBlobStore(MemoryBlobStore):
    """Memory blob store that can be told to fail, and records its calls."""

    def __init__(self, signer: UrlSigner, events: list | None = None) -> None:
        super().__init__(signer)
        self.events = events if events is not None else []
        self.fail_upload = False
        self.fail_delete = False
        self.fail_sign = False

    async def upload(self, key, data, content_type=None):
        self.events.append(("upload", key))
        if self.fail_upload:
            raise BlobStoreError("upload refused")
        await super().upload(key, data, content_type)

    async def delete(self, key):
        self.events.append(("delete_blob", key))
        if self.fail_delete:
            raise BlobStoreError("delete refused")
        await super().delete(key)

    async def sign_url(self, key, ttl_seconds):
        if self.fail_sign:
            raise BlobStoreError("signing refused")
        return await super().sign_url(key, ttl_seconds)


class RecordingRepository(PostRepository):
    """Post repository that records mutations and can fail writes."""

    def __init__(self, session_factory, events: list) -> None:
        super().__init__(session_factory)
        self.events = events
        self.fail_writes = False

    def _maybe_fail(self, operation):
        if self.fail_writes:
            raise BackendUnavailable(operation)

    async def create(self, owner, fields, image_key=None):
        self.events.append(("create_record", image_key))
        self._maybe_fail("create")
        return await super().create(owner, fields, image_key=image_key)

    async def update(self, owner, post_id, fields):
        key = fields.get("image_key") if isinstance(fields, dict) else None
        self.events.append(("update_record", key))
        self._maybe_fail("update")
        return await super().update(owner, post_id, fields)

    async def delete(self, owner, post_id):
        self.events.append(("delete_record", post_id))
        self._maybe_fail("delete")
        return await super().delete(owner, post_id)


# ============================================
# Database Fixtures
# ============================================

@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session context manager with the same commit/rollback contract as get_session."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def _session() -> AsyncGenerator[AsyncSession, None]:
        session = factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    return _session


@pytest.fixture
def insert_post(session_factory):
    """Insert a post row directly, e.g. with a fixed created_at."""

    async def _insert(owner_id: str, title: str, **fields) -> Post:
        post = Post(owner_id=owner_id, title=title, **fields)
        async with session_factory() as session:
            session.add(post)
            await session.flush()
            await session.refresh(post)
        return post

    return _insert


# ============================================
# Core Service Fixtures
# ============================================

@pytest.fixture
def events() -> list:
    """Shared call log for ordering assertions."""
    return []


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(
        signing_secret=TEST_SECRET,
        signed_url_ttl_seconds=600,
        public_base_url=TEST_BASE_URL,
    )


@pytest.fixture
def blob_store(events) -> FlakyBlobStore:
    return FlakyBlobStore(UrlSigner(TEST_SECRET, TEST_BASE_URL), events)


@pytest.fixture
def storage(storage_config, blob_store) -> StorageService:
    return StorageService(storage_config, backend=blob_store)


@pytest.fixture
def repository(session_factory, events) -> RecordingRepository:
    return RecordingRepository(session_factory, events)


@pytest.fixture
def notifications() -> NotificationCenter:
    center = NotificationCenter()
    yield center
    center.clear()


@pytest.fixture
def coordinator(repository, storage, notifications) -> ImageLifecycleCoordinator:
    return ImageLifecycleCoordinator(repository, storage, notifier=notifications)


@pytest.fixture
def views(repository, storage) -> PostViewService:
    return PostViewService(repository, storage, ttl_seconds=600)


@pytest.fixture
def owner() -> OwnerContext:
    return OwnerContext("u1")


@pytest.fixture
def other_owner() -> OwnerContext:
    return OwnerContext("u2")


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_upload(png_bytes) -> ImageUpload:
    return ImageUpload(filename="cat.png", data=png_bytes, content_type="image/png")


# ============================================
# API Fixtures
# ============================================

@pytest.fixture
async def async_client(repository, storage, notifications):
    """Async client over the ASGI app with core services overridden."""
    app.dependency_overrides[get_post_repository] = lambda: repository
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_notification_center] = lambda: notifications

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=TEST_BASE_URL,
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token('u1')}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token('u2')}"}


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no network, in-memory backends)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (long-running operations)"
    )
    config.addinivalue_line(
        "markers", "integration: HTTP API tests through the ASGI app"
    )
