"""Shared pytest fixtures for nodetree tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from nodetree.db.connection import Database
from nodetree.db.seed import seed_demo_catalog
from nodetree.main import app
from nodetree.nodes.router import get_node_service
from nodetree.nodes.service import NodeService


@pytest.fixture
async def db():
    """In-memory database for tests."""
    database = await Database.connect(":memory:")
    yield database
    await database.close()


@pytest.fixture
async def seeded_db(db):
    """In-memory database holding the demo catalog (AlphaPC and its parts)."""
    await seed_demo_catalog(db)
    return db


@pytest.fixture
async def service(seeded_db):
    return NodeService(seeded_db)


@pytest.fixture
async def client(service):
    """Async test client with the seeded in-memory DB wired into the app."""
    app.dependency_overrides[get_node_service] = lambda: service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
