"""
Collaborative recommendations over the co-interaction graph.

"People who interacted with what you interacted with also interacted with":

    (u)-[:VIEWED|BOUGHT]->(p)<-[:VIEWED|BOUGHT]-(other)-[:VIEWED|BOUGHT]->(rec)

with ``other <> u`` and ``rec <> p``. Candidates are grouped by product and
scored by the number of paths reaching them. Ordering is score descending,
then product ID ascending, so equal scores come back in a stable order.

By default products the requesting user already viewed or bought are dropped
from the final list as well (``exclude_interacted``), not only the seed
product of each path.

The engine is stateless: every call recomputes from the current graph, unless
a RecommendationCache is injected, in which case results may be up to the
cache TTL old.
"""

import logging

from ..cache.redis_cache import RecommendationCache
from ..errors import InvalidOperation
from ..models.graph import Recommendation
from .client import GraphClient
from .schema import interaction_pattern

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def build_recommendation_query(exclude_interacted: bool = True) -> str:
    """Cypher for the 2-hop co-interaction traversal."""
    rels = interaction_pattern()
    exclusion = f" AND NOT (u)-[:{rels}]->(rec)" if exclude_interacted else ""
    return (
        f"MATCH (u:User {{id: $uid}})-[:{rels}]->(p:Product)<-[:{rels}]-(other:User) "
        "WHERE other <> u "
        f"MATCH (other)-[:{rels}]->(rec:Product) "
        f"WHERE rec <> p{exclusion} "
        "RETURN rec.id AS product_id, count(*) AS score "
        "ORDER BY score DESC, product_id ASC "
        "LIMIT $lim"
    )


class RecommendationEngine:
    """Computes ranked candidate product IDs for a user."""

    def __init__(
        self,
        graph_client: GraphClient,
        cache: RecommendationCache | None = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        exclude_interacted: bool = True,
    ):
        self._graph = graph_client
        self._cache = cache
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.exclude_interacted = exclude_interacted
        self._query = build_recommendation_query(exclude_interacted)

    def _resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.default_limit
        if limit < 1:
            raise InvalidOperation(f"limit must be >= 1, got {limit}")
        return min(limit, self.max_limit)

    async def recommend(self, user_id: str, limit: int | None = None) -> list[str]:
        """
        Ordered, de-duplicated candidate product IDs for a user.

        Args:
            user_id: Requesting user
            limit: Maximum number of IDs (default 10, clamped to max_limit)

        Returns:
            Up to ``limit`` product IDs; empty for a user with no history

        Raises:
            InvalidOperation: limit < 1
            StoreUnavailable: Graph store unreachable or traversal too slow
        """
        scored = await self.recommend_scored(user_id, limit)
        return [rec.product_id for rec in scored]

    async def recommend_scored(self, user_id: str, limit: int | None = None) -> list[Recommendation]:
        """Same traversal as recommend(), keeping each candidate's path count."""
        lim = self._resolve_limit(limit)

        if self._cache is not None:
            cached = await self._cache.get(user_id, lim)
            if cached is not None:
                return [Recommendation(**item) for item in cached]

        rows = await self._graph.query(
            self._query,
            params={"uid": user_id, "lim": lim},
            read_only=True,
        )

        # Output must stay distinct even if a row repeats a product ID
        seen: set[str] = set()
        recommendations: list[Recommendation] = []
        for product_id, score in rows:
            if product_id is None or product_id in seen:
                continue
            seen.add(product_id)
            recommendations.append(Recommendation(product_id=str(product_id), score=int(score)))
            if len(recommendations) >= lim:
                break

        logger.debug(f"Computed {len(recommendations)} recommendations for user {user_id}")

        if self._cache is not None:
            await self._cache.set(user_id, lim, [rec.model_dump() for rec in recommendations])

        return recommendations

    async def invalidate(self, user_id: str) -> None:
        """Drop cached results for a user after they record a new interaction."""
        if self._cache is not None:
            await self._cache.invalidate_user(user_id)
