"""Tests for MarketplaceResources lifecycle."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from marketplace_graph.config import CacheSettings, Settings
from marketplace_graph.errors import StoreUnavailable
from marketplace_graph.resources import MarketplaceResources
from marketplace_graph.services.marketplace_service import MarketplaceGraphService


def _graph_client():
    client = MagicMock()
    client.close = AsyncMock()
    return client


def _product_store():
    store = MagicMock()
    store.close = AsyncMock()
    return store


@pytest.fixture
def factories():
    graph_client = _graph_client()
    product_store = _product_store()
    with patch(
        "marketplace_graph.resources.create_graph_client", AsyncMock(return_value=graph_client)
    ) as mock_graph, patch(
        "marketplace_graph.resources.create_product_store", AsyncMock(return_value=product_store)
    ) as mock_store:
        yield mock_graph, mock_store, graph_client, product_store


class TestInitialize:
    @pytest.mark.asyncio
    async def test_initialize_once(self, factories):
        mock_graph, mock_store, graph_client, product_store = factories
        resources = MarketplaceResources(Settings())

        await resources.initialize()
        await resources.initialize()

        assert resources.is_initialized()
        assert resources.graph_client is graph_client
        assert resources.product_store is product_store
        assert resources.cache is None
        mock_graph.assert_awaited_once()
        mock_store.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_store_failure_closes_graph(self, factories):
        _, mock_store, graph_client, _ = factories
        mock_store.side_effect = StoreUnavailable("products", "no servers")
        resources = MarketplaceResources(Settings())

        with pytest.raises(StoreUnavailable):
            await resources.initialize()

        graph_client.close.assert_awaited_once()
        assert resources.graph_client is None
        assert not resources.is_initialized()

    @pytest.mark.asyncio
    async def test_cache_failure_is_non_fatal(self, factories):
        config = Settings(cache=CacheSettings(enabled=True))
        resources = MarketplaceResources(config)

        with patch("marketplace_graph.resources.RecommendationCache") as mock_cache_cls:
            mock_cache_cls.return_value.initialize = AsyncMock(side_effect=ConnectionError("refused"))
            await resources.initialize()

        assert resources.is_initialized()
        assert resources.cache is None

    @pytest.mark.asyncio
    async def test_cache_enabled(self, factories):
        config = Settings(cache=CacheSettings(enabled=True, ttl_seconds=30))
        resources = MarketplaceResources(config)

        with patch("marketplace_graph.resources.RecommendationCache") as mock_cache_cls:
            mock_cache_cls.return_value.initialize = AsyncMock()
            await resources.initialize()

        assert resources.cache is mock_cache_cls.return_value
        assert mock_cache_cls.call_args.kwargs["ttl_seconds"] == 30


class TestServiceAndClose:
    def test_build_service_requires_initialize(self):
        with pytest.raises(RuntimeError):
            MarketplaceResources(Settings()).build_service()

    @pytest.mark.asyncio
    async def test_build_service(self, factories):
        resources = MarketplaceResources(Settings())
        await resources.initialize()

        assert isinstance(resources.build_service(), MarketplaceGraphService)

    @pytest.mark.asyncio
    async def test_close_releases_everything(self, factories):
        _, _, graph_client, product_store = factories
        resources = MarketplaceResources(Settings())
        await resources.initialize()

        await resources.close()

        graph_client.close.assert_awaited_once()
        product_store.close.assert_awaited_once()
        assert not resources.is_initialized()

    @pytest.mark.asyncio
    async def test_close_without_initialize(self):
        await MarketplaceResources(Settings()).close()
