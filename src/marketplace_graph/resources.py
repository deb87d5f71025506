"""
Process-wide resources for the marketplace graph service.

Owns the long-lived connections (graph pool, product store client, optional
cache) with an explicit lifecycle: ``initialize()`` at startup, ``close()`` at
shutdown. The web app creates one instance in its lifespan and hands it to
request handlers through dependencies instead of a module-level global.
"""

import asyncio
import logging

from .cache.redis_cache import RecommendationCache
from .config import Settings
from .graph.client import GraphClient
from .graph.factory import create_graph_client
from .services.marketplace_service import MarketplaceGraphService
from .storage.base import ProductStore
from .storage.factory import create_product_store

logger = logging.getLogger(__name__)


class MarketplaceResources:
    """Manages the graph client, product store and cache for one process."""

    def __init__(self, config: Settings):
        self._config = config
        self._graph_client: GraphClient | None = None
        self._product_store: ProductStore | None = None
        self._cache: RecommendationCache | None = None
        self._initialization_lock: asyncio.Lock = asyncio.Lock()
        self._initialized: bool = False

    async def initialize(self) -> None:
        """Open every connection. Idempotent; concurrent callers initialize once.

        The graph client and product store are required and their failures
        propagate. The cache is optional: if it can't connect, the service
        runs uncached.
        """
        if self._initialized:
            return

        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing marketplace graph resources...")

            self._graph_client = await create_graph_client(self._config.falkordb)
            try:
                self._product_store = await create_product_store(self._config.mongo)
            except Exception:
                await self._graph_client.close()
                self._graph_client = None
                raise

            cache_config = self._config.cache
            if cache_config.enabled:
                cache = RecommendationCache(
                    url=cache_config.url,
                    ttl_seconds=cache_config.ttl_seconds,
                    key_prefix=cache_config.key_prefix,
                    max_connections=cache_config.max_connections,
                )
                try:
                    await cache.initialize()
                    self._cache = cache
                except Exception as e:
                    logger.warning(f"Recommendation cache initialization failed (non-fatal): {e}")
                    self._cache = None

            self._initialized = True
            logger.info("Marketplace graph resources initialized")

    @property
    def graph_client(self) -> GraphClient | None:
        return self._graph_client

    @property
    def product_store(self) -> ProductStore | None:
        return self._product_store

    @property
    def cache(self) -> RecommendationCache | None:
        return self._cache

    def is_initialized(self) -> bool:
        return self._initialized

    def build_service(self) -> MarketplaceGraphService:
        """Service bound to these resources."""
        if not self._initialized or self._graph_client is None or self._product_store is None:
            raise RuntimeError("MarketplaceResources not initialized. Call initialize() first.")
        return MarketplaceGraphService(
            self._graph_client,
            self._product_store,
            cache=self._cache,
            recommend_settings=self._config.recommend,
        )

    async def close(self) -> None:
        """Close all managed connections. Safe to call if never initialized."""
        if self._cache is not None:
            try:
                await self._cache.close()
            except Exception as e:
                logger.warning(f"Error closing recommendation cache: {e}")
            self._cache = None

        if self._product_store is not None:
            try:
                await self._product_store.close()
            except Exception as e:
                logger.warning(f"Error closing product store: {e}")
            self._product_store = None

        if self._graph_client is not None:
            try:
                await self._graph_client.close()
            except Exception as e:
                logger.warning(f"Error closing graph client: {e}")
            self._graph_client = None

        self._initialized = False
        logger.info("Marketplace graph resources closed")
