"""Data models for the marketplace graph service."""

from .graph import ArtisanStats, InteractionType, Recommendation
from .product import Product, ProductRef

__all__ = [
    "ArtisanStats",
    "InteractionType",
    "Product",
    "ProductRef",
    "Recommendation",
]
