"""
Graph schema for the marketplace interaction graph.

Defines the Cypher schema for FalkorDB: node labels, relationship types and
indices. Schema is applied idempotently on startup.

Node Labels:
    :User     - Shopper or artisan (keyed by id)
    :Product  - Catalog product (keyed by id, mirrors the document store ID)
    :Category - Product category (keyed by name)

Relationship Types:
    :VIEWED       - User viewed a product (binary presence, no counter)
    :BOUGHT       - User purchased a product
    :HAS_CATEGORY - Product belongs to a category
    :FOLLOWS      - User follows an artisan (never a self-loop)

Indices:
    User(id), Product(id), Category(name) - Exact-match lookup for MERGE keys
"""

# User → Product interaction edges traversed by the recommendation engine.
INTERACTION_TYPES: frozenset[str] = frozenset({"VIEWED", "BOUGHT"})

# Whitelist for Cypher injection safety. FalkorDB doesn't support
# parameterized relationship types, so every type formatted into a query
# is validated against this set first.
RELATION_TYPES: frozenset[str] = INTERACTION_TYPES | frozenset({"HAS_CATEGORY", "FOLLOWS"})

NODE_LABELS: tuple[str, ...] = ("User", "Product", "Category")

# Cypher statements executed idempotently on graph initialization.
SCHEMA_STATEMENTS: list[str] = [
    "CREATE INDEX IF NOT EXISTS FOR (u:User) ON (u.id)",
    "CREATE INDEX IF NOT EXISTS FOR (p:Product) ON (p.id)",
    "CREATE INDEX IF NOT EXISTS FOR (c:Category) ON (c.name)",
]


def validate_relation_type(relation_type: str) -> str:
    """Normalize a relation type and check it against the whitelist."""
    normalized = relation_type.upper()
    if normalized not in RELATION_TYPES:
        raise ValueError(f"Invalid relation type: {relation_type!r}. Must be one of: {', '.join(sorted(RELATION_TYPES))}")
    return normalized


def interaction_pattern() -> str:
    """Relationship-type alternation matching any interaction edge."""
    return "|".join(sorted(INTERACTION_TYPES))
