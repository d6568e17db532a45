"""
Centralized Test Configuration.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.jwt import create_access_token
from backend.app.models.enums import UserRole
import backend.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

MERCHANT_EMAIL = "merchant@parcels.io"
OTHER_MERCHANT_EMAIL = "other.merchant@parcels.io"
ADMIN_EMAIL = "admin@parcels.io"
RIDER_EMAIL = "rider@parcels.io"
CUSTOMER_EMAIL = "customer@parcels.io"


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def make_token(email: str, role: UserRole, name: str = None, expires_delta: timedelta = None) -> str:
    return create_access_token(
        {"sub": email, "name": name or email.split("@")[0], "role": role.value},
        expires_delta=expires_delta,
    )


def auth_headers(email: str, role: UserRole, name: str = None) -> dict:
    return {"Authorization": f"Bearer {make_token(email, role, name)}"}


@pytest.fixture
def merchant_headers():
    return auth_headers(MERCHANT_EMAIL, UserRole.MERCHANT, "Maya Merchant")


@pytest.fixture
def other_merchant_headers():
    return auth_headers(OTHER_MERCHANT_EMAIL, UserRole.MERCHANT)


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_EMAIL, UserRole.ADMIN, "Ada Admin")


@pytest.fixture
def rider_headers():
    return auth_headers(RIDER_EMAIL, UserRole.RIDER)


@pytest.fixture
def customer_headers():
    return auth_headers(CUSTOMER_EMAIL, UserRole.USER)


def build_parcel_payload(**overrides) -> dict:
    payload = {
        "tracking_code": "TRK-0001",
        "title": "Books",
        "parcel_type": "non-document",
        "weight_kg": 2.5,
        "fare": 150.0,
        "sender_name": "Sam Sender",
        "sender_region": "Dhaka",
        "sender_warehouse": "Mirpur Hub",
        "receiver_name": "Rita Receiver",
        "receiver_region": "Chattogram",
        "receiver_warehouse": "Agrabad Hub",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def parcel_payload():
    return build_parcel_payload


@pytest.fixture
def create_parcel(client, merchant_headers):
    """Factory booking a parcel through the API and returning its JSON."""
    async def _create(headers: dict = None, **overrides) -> dict:
        response = await client.post(
            "/v1/parcels",
            json=build_parcel_payload(**overrides),
            headers=headers or merchant_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def token_factory():
    return make_token
