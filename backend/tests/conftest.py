"""
Salon Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for pure unit tests
    ├── sample_image_bytes: Minimal JPEG for upload tests
    ├── db_session_factory: Fresh SQLite database with the stylists table
    ├── db_session: One session from that factory
    ├── mock_email_send: AsyncMock replacing EmailService.send
    └── test_client: HTTPX AsyncClient wired to the app and the test database
"""

import os
import tempfile

# Override settings BEFORE any app imports: SQLite instead of PostgreSQL,
# local photo storage instead of Cloudinary, no real email delivery
_TEST_DIR = tempfile.mkdtemp(prefix="salon_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/app.db"
os.environ["MEDIA_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = os.path.join(_TEST_DIR, "storage")
os.environ["LOG_LEVEL"] = "WARNING"
for _var in ("RESEND_API_KEY", "SMTP_HOST", "EMAIL_FROM"):
    os.environ[_var] = ""

from unittest.mock import AsyncMock, MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, get_db_session  # noqa: E402
from app.models.stylist import Stylist  # noqa: E402,F401
from app.services.email_service import SendResult, email_service  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_insert(mock_db_session):
            mock_db_session.commit.side_effect = IntegrityError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def db_session_factory(tmp_path):
    """A throwaway SQLite database per test, schema created from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stylists.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_session_factory):
    async with db_session_factory() as session:
        yield session


@pytest.fixture
def mock_email_send():
    """
    Replaces EmailService.send for the duration of a test.

    Defaults to a successful primary-path delivery; tests adjust
    return_value / side_effect to exercise the other outcome tiers.
    """
    send = AsyncMock(return_value=SendResult(ok=True, provider="resend"))
    with patch.object(email_service, "send", send):
        yield send


@pytest_asyncio.fixture
async def test_client(db_session_factory, mock_email_send):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    get_db_session is overridden to use the per-test SQLite database.
    """
    from app.main import app

    async def override_get_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
