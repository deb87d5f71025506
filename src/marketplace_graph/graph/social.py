"""
Social graph: FOLLOWS edges between shoppers and artisans.

Follow is an idempotent MERGE; unfollow deletes at most one edge and treats
a missing edge as success. Self-follows are rejected before any write.
"""

import logging
import time

from ..errors import InvalidOperation
from ..models.graph import ArtisanStats
from .client import GraphClient

logger = logging.getLogger(__name__)


class SocialGraphManager:
    """Maintains User -[:FOLLOWS]-> User (artisan) edges."""

    def __init__(self, graph_client: GraphClient):
        self._graph = graph_client

    @staticmethod
    def _check_pair(follower_id: str, artisan_id: str) -> None:
        if not follower_id or not artisan_id:
            raise InvalidOperation("follower_id and artisan_id are required")
        if follower_id == artisan_id:
            raise InvalidOperation("A user cannot follow or unfollow themselves")

    async def follow_artisan(self, follower_id: str, artisan_id: str) -> None:
        """
        Create the FOLLOWS edge if it doesn't exist (MERGE = idempotent).

        Raises:
            InvalidOperation: follower_id == artisan_id
            StoreUnavailable: Graph store unreachable or too slow
        """
        self._check_pair(follower_id, artisan_id)

        await self._graph.query(
            "MERGE (u:User {id: $follower}) "
            "MERGE (a:User {id: $artisan}) "
            "MERGE (u)-[f:FOLLOWS]->(a) "
            "ON CREATE SET f.created_at = $ts",
            params={"follower": follower_id, "artisan": artisan_id, "ts": time.time()},
        )
        logger.info(f"User {follower_id} followed artisan {artisan_id}")

    async def unfollow_artisan(self, follower_id: str, artisan_id: str) -> bool:
        """
        Delete the FOLLOWS edge between the pair. Both nodes are kept.

        Returns:
            True if an edge was deleted, False if none existed.
        """
        self._check_pair(follower_id, artisan_id)

        count = await self._graph.scalar(
            "MATCH (u:User {id: $follower})-[f:FOLLOWS]->(a:User {id: $artisan}) DELETE f RETURN count(f)",
            params={"follower": follower_id, "artisan": artisan_id},
        )
        removed = int(count or 0) > 0
        if removed:
            logger.info(f"User {follower_id} unfollowed artisan {artisan_id}")
        return removed

    async def get_artisan_stats(self, artisan_id: str, current_user_id: str | None = None) -> ArtisanStats:
        """Follower count for an artisan and whether the current user follows them."""
        rows = await self._graph.query(
            "MATCH (a:User {id: $artisan}) "
            "OPTIONAL MATCH (u:User)-[:FOLLOWS]->(a) "
            "WITH a, count(u) AS followers "
            "OPTIONAL MATCH (me:User {id: $me})-[f:FOLLOWS]->(a) "
            "RETURN followers, f IS NOT NULL AS is_following",
            params={"artisan": artisan_id, "me": current_user_id},
            read_only=True,
        )
        if not rows:
            return ArtisanStats()

        followers, is_following = rows[0][0], rows[0][1]
        return ArtisanStats(followers=int(followers or 0), is_following=bool(is_following))

    async def get_followers(self, artisan_id: str) -> list[str]:
        """IDs of every user following the artisan."""
        rows = await self._graph.query(
            "MATCH (u:User)-[:FOLLOWS]->(a:User {id: $artisan}) RETURN u.id ORDER BY u.id",
            params={"artisan": artisan_id},
            read_only=True,
        )
        return [row[0] for row in rows]
