"""Service layer: hydration and the marketplace graph facade."""

from .hydrator import RecommendationHydrator
from .marketplace_service import MarketplaceGraphService

__all__ = ["MarketplaceGraphService", "RecommendationHydrator"]
