"""
FastAPI application for the marketplace graph service.

The lifespan opens the graph, product store and cache connections once per
process and closes them on shutdown. If a store is unreachable at startup the
app still serves requests; graph-backed endpoints answer 503 until restart.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI

from .. import __version__
from ..config import settings
from ..resources import MarketplaceResources
from .api import artisans, recommendations
from .dependencies import get_resources

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage resource initialization and cleanup."""
    resources = MarketplaceResources(settings)
    app.state.resources = resources

    try:
        await resources.initialize()
    except Exception as e:
        logger.error(f"Marketplace graph resources unavailable at startup: {e}")

    try:
        yield
    finally:
        logger.info("Shutting down marketplace graph service...")
        await resources.close()


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers."""
    logging.basicConfig(level=getattr(logging, settings.http.log_level.upper(), logging.INFO))

    application = FastAPI(
        title="Marketplace Graph API",
        description="Interaction tracking, artisan follows and collaborative recommendations",
        version=__version__,
        lifespan=lifespan,
    )
    application.include_router(recommendations.router, prefix="/api")
    application.include_router(artisans.router, prefix="/api")

    @application.get("/health")
    async def health(resources: MarketplaceResources | None = Depends(get_resources)) -> dict[str, Any]:
        """Service status and graph statistics."""
        if resources is None or resources.graph_client is None:
            return {"status": "degraded", "graph": None, "cache_enabled": False}

        stats = await resources.graph_client.get_graph_stats()
        return {
            "status": "ok" if stats.get("status") == "operational" else "degraded",
            "graph": stats,
            "cache_enabled": resources.cache is not None,
        }

    return application


app = create_app()


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "marketplace_graph.web.app:app",
        host=settings.http.host,
        port=settings.http.port,
    )


if __name__ == "__main__":
    main()
