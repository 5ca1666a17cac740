"""
Pytest configuration and fixtures
"""
import os
import asyncio
import tempfile
from contextlib import asynccontextmanager

_TEST_DIR = tempfile.mkdtemp(prefix="ducki-tests-")

# Settings are read at import time
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-ducki-closet-0123456789abcdef"
os.environ["DEBUG"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000/minute"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo"
os.environ["CLOUDINARY_UPLOAD_PRESET"] = "ducki_items"

import pytest
from fastapi.testclient import TestClient

from ducki.database import Base, engine, async_session_maker
from ducki.core.exceptions import MediaUploadError
from ducki.core.media_upload import MediaFile, UploadResult
from ducki.core.security import get_password_hash
from ducki.models.user import User, Profile
from ducki.services.record_store import RecordStore
import ducki.models  # noqa: F401


async def reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


class FakeUploader:
    """Stands in for the media host; records every upload"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads = []

    async def upload(self, media: MediaFile, resource: str = "image") -> UploadResult:
        if self.fail:
            raise MediaUploadError()
        self.uploads.append((media, resource))
        kind = "video" if media.is_video else "image"
        url = f"https://res.cloudinary.com/demo/{kind}/upload/v1/{len(self.uploads)}_{media.filename}"
        return UploadResult(url=url, resource_type=kind)


def image_file(name: str = "photo.jpg") -> MediaFile:
    return MediaFile(content=b"\xff\xd8\xff fake jpeg", filename=name, content_type="image/jpeg")


def video_file(name: str = "clip.mp4") -> MediaFile:
    return MediaFile(content=b"\x00\x00\x00 fake mp4", filename=name, content_type="video/mp4")


# Service-level fixtures

@pytest.fixture
async def db():
    await reset_schema()
    async with async_session_maker() as session:
        yield session


async def _create_user(db, email: str) -> User:
    user = User(email=email, hashed_password=get_password_hash("secret123"))
    db.add(user)
    await db.flush()
    db.add(Profile(id=user.id, username=email.split("@")[0]))
    await db.commit()
    return user


@pytest.fixture
async def user(db):
    return await _create_user(db, "ada@ducki.app")


@pytest.fixture
async def other_user(db):
    return await _create_user(db, "grace@ducki.app")


@pytest.fixture
def store(db, user):
    return RecordStore(db, user.id)


@pytest.fixture
def other_store(db, other_user):
    return RecordStore(db, other_user.id)


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def failing_uploader():
    return FakeUploader(fail=True)


# API fixtures

@pytest.fixture
def media_host():
    """Fake media host shared by the item and avatar upload dependencies"""
    return FakeUploader()


@pytest.fixture
def client(media_host):
    """Test client on a fresh database, without Redis, with a fake media host"""
    asyncio.run(reset_schema())

    from ducki.main import app
    from ducki.api.deps import get_item_uploader, get_avatar_uploader

    @asynccontextmanager
    async def mock_lifespan(app):
        yield {}

    app.router.lifespan_context = mock_lifespan
    app.dependency_overrides[get_item_uploader] = lambda: media_host
    app.dependency_overrides[get_avatar_uploader] = lambda: media_host

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def sign_up(client, email: str, password: str = "secret123") -> dict:
    response = client.post("/api/v1/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    """Create authorization headers"""
    tokens = sign_up(client, "ada@ducki.app")
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def other_headers(client):
    tokens = sign_up(client, "grace@ducki.app")
    return {"Authorization": f"Bearer {tokens['access_token']}"}
