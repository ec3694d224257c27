"""
Shared pytest fixtures.

Unit fixtures build transient ORM objects (no database) and the same frozen
hypermedia wiring the application uses. The HTTP fixture runs the FastAPI app
over httpx's ASGITransport against a throwaway SQLite database.

Seeded data (ids in insertion order):
    managers:  1 Gandalf, 2 Saruman
    employees: 1 Frodo Baggins, 2 Bilbo Baggins, 3 Sam Gamgee (Gandalf),
               4 Gríma Wormtongue (Saruman)
"""

import os
import tempfile

# Must be set before anything imports config.settings
_TEST_DIR = tempfile.mkdtemp(prefix="hypermedia_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from models.employee import Employee
from models.manager import Manager
from services.hypermedia import create_hypermedia


# -----------------------------------------------------------------------------
# Unit fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def hypermedia():
    return create_hypermedia()


@pytest.fixture
def gandalf():
    return Manager(id=9, name="Gandalf")


@pytest.fixture
def frodo(gandalf):
    return Employee(id=1, name="Frodo", role="ring bearer", manager_id=gandalf.id, manager=gandalf)


@pytest.fixture
def unmanaged():
    return Employee(id=2, name="Tom Bombadil", role="wanderer", manager_id=None)


# -----------------------------------------------------------------------------
# HTTP fixture
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture
async def test_client():
    """
    Fresh schema and sample data for every test; dropped afterwards.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
    """
    from main import app
    from services.database import AsyncSessionLocal, close_db, drop_db, init_db
    from services.loader import load_sample_data

    await init_db()
    async with AsyncSessionLocal() as session:
        await load_sample_data(session)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await drop_db()
    # Pooled connections belong to this test's event loop
    await close_db()
