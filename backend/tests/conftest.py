"""
Test configuration and fixtures.
Uses a throwaway SQLite database per test and an in-memory blob store.
"""
import os
import uuid as uuid_module

# Set test environment before any imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "r2"
os.environ["IMAGE_FORMATS"] = '["png", "jpg"]'

import pytest
from typing import AsyncGenerator

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.config import settings
from app.models.base import Base
from app.models.user import User
from app.models.storage_image import StorageImage
from app.models.team_member import TeamMember
from app.services.image_service import ImageService
from app.storage.base import BlobStorage
from tests.fakes import CDN_URL, CSRF_TOKEN, InMemoryBlobStorage


@pytest.fixture(scope="function")
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for testing."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tests.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def fake_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def image_service(fake_storage: InMemoryBlobStorage) -> ImageService:
    return ImageService(fake_storage, image_formats=["png", "jpg"])


@pytest.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        id=str(uuid_module.uuid4()),
        firebase_uid=f"firebase-test-uid-{uuid_module.uuid4().hex[:8]}",
        email="admin@example.com",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
async def stored_image(db_session: AsyncSession, fake_storage: InMemoryBlobStorage) -> StorageImage:
    """An image present both in the database and in the blob store."""
    name = "AbCdEfGhIjKlMnOpQrSt.png"
    fake_storage.blobs[name] = b"\x89PNG existing"
    image = StorageImage(image_name=name, uri=f"{CDN_URL}/{name}")
    db_session.add(image)
    await db_session.commit()
    await db_session.refresh(image)
    return image


@pytest.fixture(scope="function")
async def team_member(db_session: AsyncSession, fake_storage: InMemoryBlobStorage) -> TeamMember:
    """A team member whose photo exists in the blob store."""
    name = "TtEeAaMmPpHhOoTtOo12.jpg"
    fake_storage.blobs[name] = b"\xff\xd8 existing photo"
    member = TeamMember(
        first_name="Ada",
        last_name="Lovelace",
        position="Engineer",
        email="ada@example.com",
        phone="+46 70 000 00 00",
        linkedin="https://www.linkedin.com/in/ada",
        image_name=name,
        uri=f"{CDN_URL}/{name}",
    )
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member


def get_test_app(db_session: AsyncSession, test_user: User, storage: BlobStorage) -> FastAPI:
    """Create a test FastAPI app with overridden dependencies."""
    from app.main import app
    from app.database import get_db
    from app.auth.dependencies import get_current_user
    from app.storage import get_blob_storage

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_blob_storage] = lambda: storage

    return app


@pytest.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    test_user: User,
    fake_storage: InMemoryBlobStorage
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client carrying a valid anti-forgery cookie."""
    app = get_test_app(db_session, test_user, fake_storage)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={settings.csrf_cookie_name: CSRF_TOKEN}
    ) as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()
