"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Callable

# Must be set before any app imports that trigger Settings validation.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["API_TOKEN"] = "test-api-token"  # noqa: S105
os.environ.pop("API_PREFIX", None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from db.session import build_engine, create_tables  # noqa: E402

API_TOKEN = os.environ["API_TOKEN"]

SessionOverride = Callable[[], AsyncGenerator[AsyncSession]]


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header carrying the configured token."""
    return {"Authorization": f"Bearer {API_TOKEN}"}


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an async engine on a fresh in-memory database."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for arranging and inspecting test data directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_override(session_factory: async_sessionmaker[AsyncSession]) -> SessionOverride:
    """Replacement for `get_async_session` that uses the test database."""

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_async_session


@pytest.fixture
async def anon_client(session_override: SessionOverride) -> AsyncGenerator[AsyncClient]:
    """Test client without credentials, using the test database."""
    # Clear the settings cache so it picks up values from the environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    app.dependency_overrides[get_async_session] = session_override

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client(
    anon_client: AsyncClient,
    auth_headers: dict[str, str],
) -> AsyncClient:
    """Test client that sends the API token on every request."""
    anon_client.headers.update(auth_headers)
    return anon_client
