"""
Marketplace graph service.

Single entry point used by the HTTP layer (and any other caller) for
interaction tracking, the social graph and recommendations. Applies the
propagation policy:

- Tracking is best-effort. A failed write is logged and reported as False,
  never raised, so the purchase or page view that triggered it proceeds.
- Follow/unfollow and reads raise InvalidOperation / StoreUnavailable to the
  caller, which maps them to its own response shapes.
"""

import logging

from ..cache.redis_cache import RecommendationCache
from ..config import RecommendationSettings
from ..graph.client import GraphClient
from ..graph.interactions import InteractionRecorder
from ..graph.recommend import RecommendationEngine
from ..graph.social import SocialGraphManager
from ..models.graph import ArtisanStats, InteractionType
from ..models.product import Product, ProductRef
from ..storage.base import ProductStore
from .hydrator import RecommendationHydrator

logger = logging.getLogger(__name__)


class MarketplaceGraphService:
    """Facade over the recorder, social graph, engine and hydrator."""

    def __init__(
        self,
        graph_client: GraphClient,
        product_store: ProductStore,
        cache: RecommendationCache | None = None,
        recommend_settings: RecommendationSettings | None = None,
    ):
        config = recommend_settings or RecommendationSettings()

        self.recorder = InteractionRecorder(graph_client)
        self.social = SocialGraphManager(graph_client)
        self.engine = RecommendationEngine(
            graph_client,
            cache=cache,
            default_limit=config.default_limit,
            max_limit=config.max_limit,
            exclude_interacted=config.exclude_interacted,
        )
        self.hydrator = RecommendationHydrator(product_store)

    # ── Interaction tracking (best-effort) ──────────────────────────────

    async def track_interaction(
        self,
        user_id: str,
        product: ProductRef,
        interaction: InteractionType | str = InteractionType.VIEW,
    ) -> bool:
        """
        Record an interaction without ever failing the caller.

        Returns:
            True if the interaction was written, False if it was dropped.
        """
        try:
            await self.recorder.record_interaction(user_id, product, interaction)
        except Exception as e:
            logger.warning(f"Interaction tracking failed (non-fatal) for user {user_id}, product {product.id}: {e}")
            return False

        try:
            await self.engine.invalidate(user_id)
        except Exception as e:
            logger.warning(f"Recommendation cache invalidation failed (non-fatal): {e}")
        return True

    async def track_view(self, user_id: str, product: ProductRef) -> bool:
        return await self.track_interaction(user_id, product, InteractionType.VIEW)

    async def track_purchase(self, user_id: str, product: ProductRef) -> bool:
        return await self.track_interaction(user_id, product, InteractionType.PURCHASE)

    # ── Social graph ────────────────────────────────────────────────────

    async def follow_artisan(self, follower_id: str, artisan_id: str) -> None:
        await self.social.follow_artisan(follower_id, artisan_id)

    async def unfollow_artisan(self, follower_id: str, artisan_id: str) -> bool:
        return await self.social.unfollow_artisan(follower_id, artisan_id)

    async def get_artisan_stats(self, artisan_id: str, current_user_id: str | None = None) -> ArtisanStats:
        return await self.social.get_artisan_stats(artisan_id, current_user_id)

    async def get_followers(self, artisan_id: str) -> list[str]:
        return await self.social.get_followers(artisan_id)

    # ── Recommendations ─────────────────────────────────────────────────

    async def recommend_products(self, user_id: str, limit: int | None = None) -> list[Product]:
        """Recommended product records for a user, in engine rank order."""
        return [product for product, _ in await self.recommend_products_scored(user_id, limit)]

    async def recommend_products_scored(self, user_id: str, limit: int | None = None) -> list[tuple[Product, int]]:
        """Hydrated recommendations paired with their co-interaction path counts."""
        scored = await self.engine.recommend_scored(user_id, limit)
        if not scored:
            return []

        scores = {rec.product_id: rec.score for rec in scored}
        products = await self.hydrator.hydrate([rec.product_id for rec in scored])
        return [(product, scores[product.id]) for product in products]
