"""
Product document store interface.

The recommendation hydrator only needs a batch lookup by ID; product writes
belong to the catalog service and are not part of this interface.
"""

from typing import Protocol, runtime_checkable

from ..models.product import Product


@runtime_checkable
class ProductStore(Protocol):
    """Read-side view of the product catalog."""

    async def initialize(self) -> None: ...

    async def close(self) -> None: ...

    async def find_by_ids(self, product_ids: list[str]) -> list[Product]:
        """
        Return the products whose IDs are in ``product_ids``.

        IDs with no matching document are skipped. Result order is whatever
        the store returns.

        Raises:
            StoreUnavailable: The store cannot be reached
        """
        ...
