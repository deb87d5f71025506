"""
Graph layer for the marketplace.

FalkorDB-backed interaction graph:
- InteractionRecorder: VIEWED / BOUGHT / HAS_CATEGORY upserts
- SocialGraphManager: FOLLOWS edges between users and artisans
- RecommendationEngine: 2-hop co-interaction recommendations
"""

from .client import GraphClient
from .interactions import InteractionRecorder
from .recommend import RecommendationEngine
from .schema import RELATION_TYPES
from .social import SocialGraphManager

__all__ = [
    "GraphClient",
    "InteractionRecorder",
    "RecommendationEngine",
    "RELATION_TYPES",
    "SocialGraphManager",
]
