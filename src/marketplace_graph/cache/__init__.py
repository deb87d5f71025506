"""Redis cache for recommendation results."""

from .redis_cache import RecommendationCache, generate_cache_key

__all__ = ["RecommendationCache", "generate_cache_key"]
