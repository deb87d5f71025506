"""
FalkorDB graph client for the marketplace interaction graph.

Every query borrows one connection from the shared blocking pool for exactly
the duration of that query, so no connection outlives the operation that
needed it. Queries run with a server-side timeout and a client-side deadline;
both surface as ``StoreUnavailable``.

Domain operations live in the components that use this client:
- InteractionRecorder (interactions.py): VIEWED / BOUGHT / HAS_CATEGORY writes
- SocialGraphManager (social.py): FOLLOWS writes and follower reads
- RecommendationEngine (recommend.py): 2-hop co-interaction traversal
"""

import asyncio
import logging
from typing import Any

from falkordb.asyncio import FalkorDB
from redis.asyncio import BlockingConnectionPool
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..errors import StoreUnavailable
from .schema import NODE_LABELS, RELATION_TYPES, SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)

# Extra client-side wait on top of the server timeout for network round trip
_DEADLINE_SLACK_SECONDS = 0.5


class GraphClient:
    """
    Async FalkorDB client for the marketplace graph.

    Created once at startup (see resources.py) and injected into the graph
    components. ``initialize()`` opens the pool and applies the schema;
    ``close()`` releases the pool.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        graph_name: str = "marketplace_graph",
        max_connections: int = 16,
        query_timeout_ms: int = 2000,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.graph_name = graph_name
        self.max_connections = max_connections
        self.query_timeout_ms = query_timeout_ms

        self._pool: BlockingConnectionPool | None = None
        self._db: FalkorDB | None = None
        self._graph = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize connection pool, select graph, and apply schema."""
        if self._initialized:
            return

        self._pool = BlockingConnectionPool(
            host=self.host,
            port=self.port,
            password=self.password,
            max_connections=self.max_connections,
            timeout=self.query_timeout_ms / 1000,
            decode_responses=True,
        )

        self._db = FalkorDB(connection_pool=self._pool)
        self._graph = self._db.select_graph(self.graph_name)

        for stmt in SCHEMA_STATEMENTS:
            try:
                await self._graph.query(stmt)
            except (RedisConnectionError, RedisTimeoutError) as e:
                raise StoreUnavailable("graph", str(e)) from e
            except Exception as e:
                # Index already exists is not an error
                if "already indexed" not in str(e).lower():
                    logger.warning(f"Schema statement warning: {stmt} -> {e}")

        self._initialized = True
        logger.info(f"GraphClient initialized: {self.host}:{self.port}/{self.graph_name}")

    @property
    def pool(self) -> BlockingConnectionPool:
        if self._pool is None:
            raise RuntimeError("GraphClient not initialized. Call initialize() first.")
        return self._pool

    @property
    def graph(self):
        if self._graph is None:
            raise RuntimeError("GraphClient not initialized. Call initialize() first.")
        return self._graph

    # ── Query execution ─────────────────────────────────────────────────

    async def query(
        self,
        cypher: str,
        params: dict[str, Any] | None = None,
        read_only: bool = False,
    ) -> list[list[Any]]:
        """
        Run a Cypher statement within the configured time bound.

        Args:
            cypher: Cypher statement (relationship types must already be whitelisted)
            params: Query parameters
            read_only: Route through GRAPH.RO_QUERY

        Returns:
            The result set rows (empty list for statements returning nothing)

        Raises:
            StoreUnavailable: Connection failure or time bound exceeded
        """
        graph = self.graph
        run = graph.ro_query if read_only else graph.query
        deadline = self.query_timeout_ms / 1000 + _DEADLINE_SLACK_SECONDS

        try:
            result = await asyncio.wait_for(
                run(cypher, params=params, timeout=self.query_timeout_ms),
                timeout=deadline,
            )
        except asyncio.TimeoutError as e:
            raise StoreUnavailable("graph", f"query exceeded {deadline:.1f}s deadline") from e
        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            raise StoreUnavailable("graph", str(e)) from e
        except ResponseError as e:
            if "timed out" in str(e).lower():
                raise StoreUnavailable("graph", str(e)) from e
            raise

        return list(result.result_set or [])

    async def scalar(self, cypher: str, params: dict[str, Any] | None = None, read_only: bool = False) -> Any:
        """Run a query and return the first column of the first row (or None)."""
        rows = await self.query(cypher, params=params, read_only=read_only)
        if not rows:
            return None
        return rows[0][0]

    # ── Health ──────────────────────────────────────────────────────────

    async def get_graph_stats(self) -> dict[str, Any]:
        """Get node and edge counts for health checks."""
        try:
            node_counts: dict[str, int] = {}
            for label in NODE_LABELS:
                count = await self.scalar(f"MATCH (n:{label}) RETURN count(n)", read_only=True)
                node_counts[label.lower()] = int(count or 0)

            edge_counts: dict[str, int] = {}
            for rel in sorted(RELATION_TYPES):
                count = await self.scalar(f"MATCH ()-[e:{rel}]->() RETURN count(e)", read_only=True)
                edge_counts[rel.lower()] = int(count or 0)

            return {
                "graph_name": self.graph_name,
                "node_counts": node_counts,
                "edge_counts": edge_counts,
                "node_count": sum(node_counts.values()),
                "edge_count": sum(edge_counts.values()),
                "status": "operational",
            }
        except Exception as e:
            logger.error(f"Failed to get graph stats: {e}")
            return {
                "graph_name": self.graph_name,
                "status": "error",
                "error": str(e),
            }

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            try:
                await self._pool.aclose()
                logger.info("GraphClient connection pool closed")
            except Exception as e:
                logger.warning(f"Error closing GraphClient pool: {e}")
            finally:
                self._pool = None
                self._db = None
                self._graph = None
                self._initialized = False
