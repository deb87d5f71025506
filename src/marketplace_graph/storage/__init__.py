"""Product document store backends."""

from .base import ProductStore
from .mongo_store import MongoProductStore

__all__ = ["MongoProductStore", "ProductStore"]
