import os
import sys

# 必須在 import app 之前設定，Settings() 會在 import 時讀取環境變數
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

# Ensure backend package is on sys.path for imports during tests
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import get_password_hash
from app.main import app
from app.models.user import User, UserRoleEnum


@pytest.fixture
async def engine():
    # StaticPool: 所有連線共用同一個 in-memory 資料庫
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
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """直接寫入資料庫建立使用者 (給 Repository / Service 測試用)"""
    async def _make_user(email: str, role: UserRoleEnum = UserRoleEnum.freelancer, name: str = "Test User") -> User:
        user = User(email=email, name=name, password_hash=get_password_hash("password123"), role=role)
        db_session.add(user)
        await db_session.commit()
        return user
    return _make_user


@pytest.fixture
def register(client):
    """透過 API 註冊並回傳 (auth headers, user dict)"""
    async def _register(email: str, role: str, name: str = "Test User", password: str = "password123"):
        res = await client.post(
            "/auth/register",
            json={"email": email, "name": name, "password": password, "role": role},
        )
        assert res.status_code == 201, res.text
        data = res.json()["data"]
        headers = {"Authorization": f"Bearer {data['access_token']}"}
        return headers, data["user"]
    return _register
