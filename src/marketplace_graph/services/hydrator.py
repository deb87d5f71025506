"""Resolve recommended product IDs to full catalog records."""

import logging

from ..models.product import Product
from ..storage.base import ProductStore

logger = logging.getLogger(__name__)


class RecommendationHydrator:
    """Joins engine output against the product store, keeping engine order."""

    def __init__(self, product_store: ProductStore):
        self._store = product_store

    async def hydrate(self, product_ids: list[str]) -> list[Product]:
        """
        Fetch the records for ``product_ids`` in the same order.

        IDs without a document (e.g. products deleted from the catalog after
        being interacted with) are dropped. Repeated IDs yield one record.
        """
        if not product_ids:
            return []

        ordered_ids = list(dict.fromkeys(product_ids))
        products = await self._store.find_by_ids(ordered_ids)

        by_id = {p.id: p for p in products}
        hydrated = [by_id[pid] for pid in ordered_ids if pid in by_id]

        missing = len(ordered_ids) - len(hydrated)
        if missing:
            logger.debug(f"Dropped {missing} recommended product(s) missing from the catalog")
        return hydrated
