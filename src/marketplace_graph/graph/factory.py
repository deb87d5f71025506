"""
Factory for creating and initializing the graph client.

Creates a GraphClient from FalkorDBSettings.
"""

import logging

from ..config import FalkorDBSettings
from .client import GraphClient

logger = logging.getLogger(__name__)


async def create_graph_client(config: FalkorDBSettings) -> GraphClient:
    """
    Create and initialize the FalkorDB graph client.

    Raises:
        StoreUnavailable: If the graph store cannot be reached during schema bootstrap.
    """
    password = config.password.get_secret_value() if config.password else None

    client = GraphClient(
        host=config.host,
        port=config.port,
        password=password,
        graph_name=config.graph_name,
        max_connections=config.max_connections,
        query_timeout_ms=config.query_timeout_ms,
    )

    await client.initialize()

    logger.info(f"Graph layer initialized: {config.host}:{config.port}/{config.graph_name}")
    return client
