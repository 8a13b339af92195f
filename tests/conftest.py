"""
HotOrNot Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database: Database handle on a temporary SQLite file, schema created
    ├── make_image: Inserts an image with given tallies, returns its id
    ├── mock_db_session: Mock AsyncSession (no real DB needed)
    ├── temp_upload_dir: Temporary directory for file operations
    ├── sample_image_bytes: Fake image content for upload tests
    └── test_client: HTTPX AsyncClient wired to the app and `database`
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must happen BEFORE any hotornot import: settings are read at import time
_TEST_ROOT = tempfile.mkdtemp(prefix="hotornot_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/app.sqlite"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["PUBLIC_DIR"] = os.path.join(_TEST_ROOT, "public-missing")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from hotornot.database import Database, get_database  # noqa: E402
from hotornot.models.image import Image  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database(tmp_path):
    """
    A real Database on a per-test SQLite file.

    On-disk rather than :memory: so that concurrent sessions use separate
    connections, the same way they do in production.
    """
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite'}", busy_timeout=30.0)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def make_image(database):
    """
    Factory fixture inserting an image with preset tallies.

    Usage:
        image_id = await make_image(hot=3, total=4)
    """
    counter = {"n": 0}

    async def _make(hot: int = 0, total: int = 0, filename: str = None) -> int:
        counter["n"] += 1
        name = filename or f"image-{counter['n']}.jpg"
        async with database.session() as session:
            image = Image(
                filename=name,
                url=f"/uploads/{name}",
                total_votes=total,
                hot_votes=hot,
            )
            session.add(image)
            await session.flush()
            return image.id

    return _make


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("stmt", {}, Exception())
        with pytest.raises(StorageError):
            await store.list_images(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# File Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_upload_dir(tmp_path):
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    return str(upload_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    The app's Database dependency is overridden with the per-test `database`
    so every test starts from empty tables.
    """
    from hotornot.main import app

    app.dependency_overrides[get_database] = lambda: database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
