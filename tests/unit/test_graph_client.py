"""
Unit tests for GraphClient.

Tests the FalkorDB graph client with mocked FalkorDB/Redis connections.
Validates schema initialization, bounded query execution, error mapping,
and graph stats.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from marketplace_graph.errors import StoreUnavailable


@pytest.fixture
def mock_graph():
    """Create a mock FalkorDB graph."""
    return AsyncMock()


def _client(mock_graph, **kwargs):
    from marketplace_graph.graph.client import GraphClient

    client = GraphClient(**kwargs)
    client._graph = mock_graph
    client._initialized = True
    return client


def _result(rows):
    result = MagicMock()
    result.result_set = rows
    return result


class TestGraphClientInit:
    """Test GraphClient initialization and schema application."""

    @pytest.mark.asyncio
    @patch("marketplace_graph.graph.client.BlockingConnectionPool")
    @patch("marketplace_graph.graph.client.FalkorDB")
    async def test_initialize_creates_pool_and_applies_schema(self, mock_falkordb_cls, mock_pool_cls):
        from marketplace_graph.graph.client import GraphClient

        mock_pool_cls.return_value = MagicMock(aclose=AsyncMock())
        mock_graph_instance = AsyncMock()
        mock_db_instance = MagicMock()
        mock_db_instance.select_graph.return_value = mock_graph_instance
        mock_falkordb_cls.return_value = mock_db_instance

        client = GraphClient(host="testhost", port=6380, graph_name="test_graph", max_connections=8, query_timeout_ms=1500)
        await client.initialize()

        mock_pool_cls.assert_called_once_with(
            host="testhost",
            port=6380,
            password=None,
            max_connections=8,
            timeout=1.5,
            decode_responses=True,
        )
        mock_db_instance.select_graph.assert_called_once_with("test_graph")

        # User, Product, Category indices
        assert mock_graph_instance.query.call_count == 3

        # Idempotent: second call is no-op
        await client.initialize()
        assert mock_graph_instance.query.call_count == 3

    @pytest.mark.asyncio
    @patch("marketplace_graph.graph.client.BlockingConnectionPool")
    @patch("marketplace_graph.graph.client.FalkorDB")
    async def test_initialize_handles_existing_index(self, mock_falkordb_cls, mock_pool_cls):
        """Schema statements that fail with 'already indexed' are silently ignored."""
        from marketplace_graph.graph.client import GraphClient

        mock_pool_cls.return_value = MagicMock(aclose=AsyncMock())
        mock_graph = AsyncMock()
        mock_graph.query.side_effect = Exception("Attribute 'id' is already indexed")
        mock_falkordb_cls.return_value = MagicMock(select_graph=MagicMock(return_value=mock_graph))

        client = GraphClient()
        await client.initialize()  # Should not raise

    @pytest.mark.asyncio
    @patch("marketplace_graph.graph.client.BlockingConnectionPool")
    @patch("marketplace_graph.graph.client.FalkorDB")
    async def test_initialize_unreachable_store(self, mock_falkordb_cls, mock_pool_cls):
        from marketplace_graph.graph.client import GraphClient

        mock_pool_cls.return_value = MagicMock(aclose=AsyncMock())
        mock_graph = AsyncMock()
        mock_graph.query.side_effect = RedisConnectionError("Connection refused")
        mock_falkordb_cls.return_value = MagicMock(select_graph=MagicMock(return_value=mock_graph))

        client = GraphClient()
        with pytest.raises(StoreUnavailable) as exc_info:
            await client.initialize()
        assert exc_info.value.store == "graph"

    def test_uninitialized_access_raises(self):
        from marketplace_graph.graph.client import GraphClient

        client = GraphClient()
        with pytest.raises(RuntimeError):
            _ = client.graph
        with pytest.raises(RuntimeError):
            _ = client.pool


class TestGraphClientQuery:
    """Test bounded query execution and error mapping."""

    @pytest.mark.asyncio
    async def test_query_returns_rows_and_passes_timeout(self, mock_graph):
        mock_graph.query.return_value = _result([["p1", 2]])
        client = _client(mock_graph, query_timeout_ms=750)

        rows = await client.query("MATCH (n) RETURN n", params={"x": 1})

        assert rows == [["p1", 2]]
        mock_graph.query.assert_called_once_with("MATCH (n) RETURN n", params={"x": 1}, timeout=750)

    @pytest.mark.asyncio
    async def test_read_only_uses_ro_query(self, mock_graph):
        mock_graph.ro_query.return_value = _result([])
        client = _client(mock_graph)

        rows = await client.query("MATCH (n) RETURN n", read_only=True)

        assert rows == []
        mock_graph.ro_query.assert_called_once()
        mock_graph.query.assert_not_called()

    @pytest.mark.asyncio
    async def test_connection_error_maps_to_store_unavailable(self, mock_graph):
        mock_graph.query.side_effect = RedisConnectionError("Connection refused")
        client = _client(mock_graph)

        with pytest.raises(StoreUnavailable) as exc_info:
            await client.query("MATCH (n) RETURN n")

        assert exc_info.value.store == "graph"
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_server_timeout_maps_to_store_unavailable(self, mock_graph):
        mock_graph.query.side_effect = ResponseError("Query timed out")
        client = _client(mock_graph)

        with pytest.raises(StoreUnavailable):
            await client.query("MATCH (n) RETURN n")

    @pytest.mark.asyncio
    async def test_client_deadline_maps_to_store_unavailable(self, mock_graph):
        async def slow(*args, **kwargs):
            await asyncio.sleep(5)

        mock_graph.query.side_effect = slow
        client = _client(mock_graph, query_timeout_ms=10)

        with pytest.raises(StoreUnavailable, match="deadline"):
            await client.query("MATCH (n) RETURN n")

    @pytest.mark.asyncio
    async def test_syntax_errors_propagate(self, mock_graph):
        mock_graph.query.side_effect = ResponseError("errMsg: Invalid input")
        client = _client(mock_graph)

        with pytest.raises(ResponseError):
            await client.query("MATC (n)")

    @pytest.mark.asyncio
    async def test_scalar(self, mock_graph):
        mock_graph.query.side_effect = [_result([[3]]), _result([])]
        client = _client(mock_graph)

        assert await client.scalar("RETURN 3") == 3
        assert await client.scalar("RETURN 3") is None


class TestGraphClientStats:
    @pytest.mark.asyncio
    async def test_get_graph_stats(self, mock_graph):
        # Node labels: User, Product, Category
        # Relation types sorted: BOUGHT, FOLLOWS, HAS_CATEGORY, VIEWED
        counts = [10, 20, 3, 5, 4, 20, 30]
        mock_graph.ro_query.side_effect = [_result([[c]]) for c in counts]
        client = _client(mock_graph, graph_name="test_graph")

        stats = await client.get_graph_stats()

        assert stats["status"] == "operational"
        assert stats["node_counts"] == {"user": 10, "product": 20, "category": 3}
        assert stats["edge_counts"] == {"bought": 5, "follows": 4, "has_category": 20, "viewed": 30}
        assert stats["node_count"] == 33
        assert stats["edge_count"] == 59

    @pytest.mark.asyncio
    async def test_get_graph_stats_error(self, mock_graph):
        mock_graph.ro_query.side_effect = RedisConnectionError("connection refused")
        client = _client(mock_graph, graph_name="test_graph")

        stats = await client.get_graph_stats()
        assert stats["status"] == "error"
        assert "connection refused" in stats["error"]


class TestGraphClientClose:
    @pytest.mark.asyncio
    async def test_close_releases_pool(self, mock_graph):
        client = _client(mock_graph)
        pool = MagicMock(aclose=AsyncMock())
        client._pool = pool

        await client.close()

        pool.aclose.assert_awaited_once()
        assert client._graph is None
        assert client._initialized is False

    @pytest.mark.asyncio
    async def test_close_without_pool_is_noop(self):
        from marketplace_graph.graph.client import GraphClient

        await GraphClient().close()
