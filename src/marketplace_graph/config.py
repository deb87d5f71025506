"""
Configuration for the marketplace graph service.

Settings are grouped per backend, each group reading its own environment
prefix (e.g. ``MKT_FALKORDB_HOST``). A module-level ``settings`` instance is
created at import time; components receive the values they need explicitly.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FalkorDBSettings(BaseSettings):
    """FalkorDB graph store connection settings."""

    model_config = SettingsConfigDict(env_prefix="MKT_FALKORDB_", extra="ignore")

    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    password: SecretStr | None = None
    graph_name: str = "marketplace_graph"
    max_connections: int = Field(default=16, ge=1, le=512)
    # Applied to every query; multi-hop traversals can be expensive on dense graphs
    query_timeout_ms: int = Field(default=2000, ge=10, le=60_000)


class MongoSettings(BaseSettings):
    """MongoDB product document store settings."""

    model_config = SettingsConfigDict(env_prefix="MKT_MONGO_", extra="ignore")

    uri: SecretStr = SecretStr("mongodb://localhost:27017")
    database: str = "marketplace"
    products_collection: str = "products"
    server_selection_timeout_ms: int = Field(default=3000, ge=100, le=60_000)


class CacheSettings(BaseSettings):
    """Redis cache for computed recommendation lists."""

    model_config = SettingsConfigDict(env_prefix="MKT_CACHE_", extra="ignore")

    enabled: bool = False
    url: str = "redis://localhost:6379"
    ttl_seconds: int = Field(default=60, ge=1, le=3600)
    key_prefix: str = "mkt:recs:"
    max_connections: int = Field(default=10, ge=1, le=256)


class RecommendationSettings(BaseSettings):
    """Traversal limits and filtering for the recommendation engine."""

    model_config = SettingsConfigDict(env_prefix="MKT_RECOMMEND_", extra="ignore")

    default_limit: int = Field(default=10, ge=1, le=1000)
    max_limit: int = Field(default=100, ge=1, le=1000)
    exclude_interacted: bool = True


class HTTPSettings(BaseSettings):
    """HTTP adapter settings."""

    model_config = SettingsConfigDict(env_prefix="MKT_HTTP_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"


class Settings(BaseSettings):
    """Aggregate settings for all components."""

    model_config = SettingsConfigDict(extra="ignore")

    falkordb: FalkorDBSettings = Field(default_factory=FalkorDBSettings)
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    recommend: RecommendationSettings = Field(default_factory=RecommendationSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)


settings = Settings()
