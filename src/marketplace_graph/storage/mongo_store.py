"""
MongoDB-backed product store.

Uses pymongo's asyncio client. Product IDs in the graph are the string form
of the document ``_id``; IDs that parse as ObjectIds are matched in both
forms so catalogs keyed by plain strings work too.
"""

import logging
from typing import Any

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.errors import AutoReconnect, ConnectionFailure, ServerSelectionTimeoutError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..errors import StoreUnavailable
from ..models.product import Product

logger = logging.getLogger(__name__)


def is_retryable_error(exception: BaseException) -> bool:
    """
    Transient connection drops are retryable; a server selection timeout is not,
    because the driver has already waited the full selection window.
    """
    return isinstance(exception, AutoReconnect) and not isinstance(exception, ServerSelectionTimeoutError)


def to_id_filter(product_ids: list[str]) -> list[Any]:
    """Values for an ``_id: {$in: ...}`` filter covering ObjectId and string keys."""
    values: list[Any] = []
    for pid in product_ids:
        if ObjectId.is_valid(pid):
            values.append(ObjectId(pid))
        values.append(pid)
    return values


class MongoProductStore:
    """Product lookups against a MongoDB collection."""

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database: str = "marketplace",
        collection: str = "products",
        server_selection_timeout_ms: int = 3000,
    ):
        self.uri = uri
        self.database = database
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms

        self._client: AsyncMongoClient | None = None
        self._collection = None

    async def initialize(self) -> None:
        """Create the client and verify the server is reachable."""
        if self._client is not None:
            return

        self._client = AsyncMongoClient(
            self.uri,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )
        try:
            await self._client.admin.command("ping")
        except ConnectionFailure as e:
            await self._client.close()
            self._client = None
            raise StoreUnavailable("products", str(e)) from e

        self._collection = self._client[self.database][self.collection_name]
        logger.info(f"MongoProductStore initialized: {self.database}.{self.collection_name}")

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collection = None
            logger.info("MongoProductStore closed")

    @retry(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        reraise=True,
    )
    async def _find(self, id_values: list[Any]) -> list[dict[str, Any]]:
        cursor = self._collection.find({"_id": {"$in": id_values}})
        return await cursor.to_list(length=None)

    async def find_by_ids(self, product_ids: list[str]) -> list[Product]:
        """Fetch the products matching ``product_ids``; unknown IDs are skipped."""
        if not product_ids:
            return []
        if self._collection is None:
            raise RuntimeError("MongoProductStore not initialized. Call initialize() first.")

        try:
            docs = await self._find(to_id_filter(product_ids))
        except ConnectionFailure as e:
            raise StoreUnavailable("products", str(e)) from e

        products: list[Product] = []
        for doc in docs:
            try:
                products.append(Product.from_document(doc))
            except ValueError as e:
                logger.warning(f"Skipping malformed product document {doc.get('_id')}: {e}")
        return products
