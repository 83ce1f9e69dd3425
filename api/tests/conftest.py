"""Pytest configuration and fixtures."""

import asyncio
import os
import tempfile
from typing import Dict, Iterable, List, Optional, Tuple

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite:///:memory:")
os.environ.setdefault("STORAGE_PROVIDER", "local")
os.environ.setdefault("STORAGE_BASE_PATH", tempfile.mkdtemp(prefix="artwork-admin-test-"))
os.environ.setdefault("STORAGE_PUBLIC_BASE_URL", "https://cdn.example.test")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_storage, require_admin
from app.database import Base, get_db
from app.main import app
from app.services.record_store import RecordStoreError, SqlRecordStore
from app.storage.base import BaseStorageDriver, StorageError


class FakeStorageDriver(BaseStorageDriver):
    """In-memory object store that records every call."""

    def __init__(self, upload_delay: float = 0.0):
        super().__init__(
            {
                "bucket": "artworks",
                "public_base_url": "https://cdn.example.test",
            }
        )
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.events: List[Tuple[str, object]] = []
        self.upload_delay = upload_delay
        self.fail_put: set = set()
        self.fail_delete = False

    async def put_object(self, path, content, content_type="application/octet-stream", overwrite=True):
        if self.upload_delay:
            await asyncio.sleep(self.upload_delay)
        if any(path.startswith(prefix) for prefix in self.fail_put):
            raise StorageError(f"upload rejected: {path}")
        if path in self.objects and not overwrite:
            raise StorageError(f"Object already exists: {path}")
        self.objects[path] = (content, content_type)
        self.events.append(("put", path))

    async def delete_objects(self, paths: Iterable[str]) -> List[str]:
        paths = list(paths)
        self.events.append(("delete", paths))
        if self.fail_delete:
            raise StorageError("delete rejected")
        for path in paths:
            self.objects.pop(path, None)
        return []

    async def object_exists(self, path: str) -> bool:
        return path in self.objects

    async def test_connection(self) -> bool:
        return True

    @property
    def puts(self) -> List[str]:
        return [p for kind, p in self.events if kind == "put"]

    @property
    def deletes(self) -> List[List[str]]:
        return [p for kind, p in self.events if kind == "delete"]

    def url(self, path: str) -> str:
        return self.get_public_url(path)


class RecordingStore(SqlRecordStore):
    """Record store that logs writes and checks asset locators resolve.

    Each locator written must point at an object that already exists in
    ``storage`` at the moment of the write.
    """

    def __init__(self, db, storage: Optional[FakeStorageDriver] = None):
        super().__init__(db)
        self.storage = storage
        self.writes: List[Tuple[str, object, dict]] = []
        self.fail_updates = False
        self.fail_ids: set = set()

    def _check_locators(self, fields):
        if self.storage is None:
            return
        for name in ("html_url", "preview_video_url", "thumb_url"):
            url = fields.get(name)
            if url:
                path = self.storage.path_from_public_url(url)
                if path is not None:
                    assert path in self.storage.objects, f"{name} points at missing object {path}"

    def insert(self, fields):
        self._check_locators(fields)
        self.writes.append(("insert", None, dict(fields)))
        return super().insert(fields)

    def update(self, artwork_id, fields):
        self._check_locators(fields)
        self.writes.append(("update", artwork_id, dict(fields)))
        if self.fail_updates or artwork_id in self.fail_ids:
            raise RecordStoreError("update rejected")
        if self.storage is not None:
            self.storage.events.append(("update", artwork_id))
        return super().update(artwork_id, fields)

    def delete(self, artwork_id):
        self.writes.append(("delete", artwork_id, {}))
        return super().delete(artwork_id)


@pytest.fixture(scope="session")
def test_engine():
    """Create test database engine."""
    # Use in-memory SQLite shared across threads for tests
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def test_db(test_engine):
    """Create a test database session, emptied after each test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture
def storage():
    """In-memory object store."""
    return FakeStorageDriver()


@pytest.fixture
def store(test_db, storage):
    """Record store over the test database that checks locators against ``storage``."""
    return RecordingStore(test_db, storage)


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def client_with_db(test_db, storage):
    """Create a test client with database, storage and admin session overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[require_admin] = lambda: "admin@example.com"
    yield TestClient(app)
    app.dependency_overrides.clear()


def run(coro):
    """Drive an async service call from a plain test."""
    return asyncio.run(coro)
