"""
Interaction recording for the marketplace graph.

Writes User, Product and Category nodes plus VIEWED / BOUGHT / HAS_CATEGORY
edges. Each interaction is a single MERGE statement, so it is atomic and
idempotent: recording the same interaction twice leaves the graph exactly as
one call did, and concurrent writes of the same pair converge on one edge.
"""

import logging
import time

from ..errors import InvalidOperation
from ..models.graph import InteractionType
from ..models.product import ProductRef
from .client import GraphClient
from .schema import validate_relation_type

logger = logging.getLogger(__name__)


class InteractionRecorder:
    """Records user → product interactions in the graph."""

    def __init__(self, graph_client: GraphClient):
        self._graph = graph_client

    async def record_view(self, user_id: str, product: ProductRef) -> None:
        """Ensure a VIEWED edge from the user to the product."""
        await self.record_interaction(user_id, product, InteractionType.VIEW)

    async def record_purchase(self, user_id: str, product: ProductRef) -> None:
        """Ensure a BOUGHT edge from the user to the product."""
        await self.record_interaction(user_id, product, InteractionType.PURCHASE)

    async def record_interaction(
        self,
        user_id: str,
        product: ProductRef,
        interaction: InteractionType | str,
    ) -> None:
        """
        Upsert the nodes and edges for one interaction.

        The product node's name is overwritten when one is supplied. When the
        product carries a category, the Category node and HAS_CATEGORY edge are
        merged in the same statement as the interaction edge.

        Raises:
            InvalidOperation: Blank user ID or unknown interaction type
            StoreUnavailable: Graph store unreachable or too slow
        """
        if not user_id or not user_id.strip():
            raise InvalidOperation("user_id must not be blank")

        try:
            kind = InteractionType(interaction)
        except ValueError as e:
            raise InvalidOperation(f"Unknown interaction type: {interaction!r}") from e

        rel = validate_relation_type(kind.relation)

        clauses = [
            "MERGE (u:User {id: $uid})",
            "MERGE (p:Product {id: $pid})",
            "SET p.name = coalesce($name, p.name)",
        ]
        params = {
            "uid": user_id,
            "pid": product.id,
            "name": product.name,
            "ts": time.time(),
        }

        if product.category is not None:
            clauses.append("MERGE (c:Category {name: $category})")
            clauses.append("MERGE (p)-[hc:HAS_CATEGORY]->(c)")
            params["category"] = product.category

        clauses.append(f"MERGE (u)-[r:{rel}]->(p)")
        clauses.append("ON CREATE SET r.created_at = $ts")

        await self._graph.query(" ".join(clauses), params=params)
        logger.debug(f"User {user_id} {kind.value} product {product.id}")
