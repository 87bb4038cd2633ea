import os

# Must be set before the app modules build their settings and engine
os.environ["ENVIRONMENT"] = "testing"
os.environ["TEST_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from datetime import datetime, timedelta
from typing import AsyncGenerator, Callable, Dict
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from socialfeed.main import app
from socialfeed.db.base import Base
from socialfeed.db.client import DataClient
from socialfeed.db.session import engine, AsyncSessionLocal
from socialfeed.models import Profile, Post
from socialfeed.services.redis_service import get_redis
from socialfeed.services.session_service import Session, SessionService
from socialfeed.services.storage_service import StorageService, get_storage


class FakeRedis:
    """In-memory stand-in for RedisService"""

    def __init__(self):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    async def setex(self, key: str, expire: int, value: str):
        self.store[key] = value
        self.ttls[key] = expire

    async def get(self, key: str):
        return self.store.get(key)


@pytest.fixture(autouse=True)
async def setup_test_database():
    """Fresh in-memory database for every test"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def data_client(test_db: AsyncSession) -> DataClient:
    return DataClient(test_db)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def storage(tmp_path) -> StorageService:
    return StorageService(root=str(tmp_path), bucket="chat-images", public_url="http://testserver/storage")


@pytest.fixture
def session_service(fake_redis: FakeRedis) -> SessionService:
    return SessionService(fake_redis)


@pytest.fixture
async def test_client(fake_redis: FakeRedis, storage: StorageService) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def alice(data_client: DataClient) -> Profile:
    return await data_client.insert(Profile, user_id="user-alice", full_name="Alice Adams", avatar_url="http://img/alice.png")


@pytest.fixture
async def bob(data_client: DataClient) -> Profile:
    return await data_client.insert(Profile, user_id="user-bob", full_name="Bob Brown")


@pytest.fixture
def make_session(session_service: SessionService) -> Callable[[Profile], Session]:
    def _make(profile: Profile) -> Session:
        token = session_service.create_access_token(
            profile.user_id,
            email=f"{profile.user_id}@example.com",
            metadata={"full_name": profile.full_name}
        )
        return Session(
            user_id=profile.user_id,
            email=f"{profile.user_id}@example.com",
            full_name=profile.full_name,
            access_token=token,
            expires_at=datetime.utcnow() + timedelta(hours=1)
        )
    return _make


@pytest.fixture
def auth_headers(make_session) -> Callable[[Profile], Dict[str, str]]:
    def _headers(profile: Profile) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_session(profile).access_token}"}
    return _headers


@pytest.fixture
def make_post(data_client: DataClient):
    """Insert a post directly, with an explicit creation time"""
    async def _make(author: Profile, content: str, minutes_ago: int = 0, **values) -> Post:
        return await data_client.insert(
            Post,
            user_id=author.user_id,
            content=content,
            created_at=datetime(2026, 1, 1, 12, 0) - timedelta(minutes=minutes_ago),
            **values
        )
    return _make
