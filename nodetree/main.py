"""nodetree FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nodetree import __version__, middleware
from nodetree.config import load_settings
from nodetree.db.connection import Database
from nodetree.db.seed import seed_demo_catalog
from nodetree.nodes.router import get_node_service
from nodetree.nodes.router import router as nodes_router
from nodetree.nodes.service import NodeService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage database lifecycle and service wiring."""
    settings = load_settings()
    logging.getLogger("nodetree").setLevel(settings.log_level)

    db = await Database.connect(settings.db_path)
    if settings.seed_demo:
        await seed_demo_catalog(db)
        logger.info("Demo catalog loaded into %s", settings.db_path)

    service = NodeService(db)
    app.dependency_overrides[get_node_service] = lambda: service

    yield

    await db.close()


app = FastAPI(
    title="nodetree",
    description="Hierarchical node catalog with numeric properties",
    version=__version__,
    lifespan=lifespan,
)

middleware.install(app)
app.include_router(nodes_router)


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}
