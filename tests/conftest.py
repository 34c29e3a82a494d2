"""
Test infrastructure for the InsightPro API.

Strategy
--------
- SQLite in-memory via aiosqlite: the same dialect as the default file-backed
  store, with nothing to clean up on disk.
- StaticPool keeps a single connection so every session sees the same
  in-memory database (in-memory SQLite is per connection).
- Foreign keys are switched on for the test engine exactly as for the
  application engine, so comment cascades behave the same.
- ``get_db`` is overridden so every request uses the test session factory.
- Tables are created before and dropped after each test.
- Redis is disabled with ``cache._redis = None``; the CacheManager treats
  that as a permanent miss, so every read hits the database.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from insightpro.cache import cache
from insightpro.database import Base, get_db, install_sqlite_foreign_keys
from insightpro.main import app
from insightpro.middleware import install_query_counter
import insightpro.models  # noqa: F401

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_sqlite_foreign_keys(engine_test)
install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override: replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
            await cache.run_pending_invalidations(session)
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    cache._redis = None
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for calling services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def product_payload() -> dict:
    return {
        "name": "Widget Pro",
        "company": "Acme",
        "average_rating": 4.5,
        "comments": ["a", "b"],
    }


@pytest_asyncio.fixture
async def registered_account(async_client: AsyncClient) -> dict:
    """Register an account over HTTP and return its credentials."""
    credentials = {
        "email": "owner@acme.example",
        "password": "s3cret-Pass",
        "company": "Acme",
    }
    resp = await async_client.post("/registro", json=credentials)
    assert resp.status_code == 201
    return credentials


@pytest_asyncio.fixture
async def auth_token(async_client: AsyncClient, registered_account: dict) -> str:
    resp = await async_client.post("/login", json={
        "email": registered_account["email"],
        "password": registered_account["password"],
    })
    assert resp.status_code == 200
    return resp.json()["token"]
