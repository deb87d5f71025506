import os
import re
import sys
from collections import Counter

import pytest

# Keep tests off any real backends configured in the developer's shell
os.environ.setdefault("MKT_CACHE_ENABLED", "false")

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

_INTERACTION_MERGE = re.compile(r"MERGE \(u\)-\[r:(\w+)\]->\(p\)")


class FakeGraphClient:
    """
    Adjacency-list stand-in for GraphClient.

    Recognizes the statements issued by the graph components and applies the
    same MERGE / DELETE / traversal semantics to plain Python sets, so tests
    can assert on resulting graph state without a FalkorDB server.
    """

    def __init__(self):
        self.users: set[str] = set()
        self.products: dict[str, str | None] = {}
        self.categories: set[str] = set()
        self.edges: dict[str, set[tuple[str, str]]] = {
            "VIEWED": set(),
            "BOUGHT": set(),
            "HAS_CATEGORY": set(),
            "FOLLOWS": set(),
        }
        self.queries: list[str] = []

    def edge_count(self, rel: str) -> int:
        return len(self.edges[rel])

    def _interaction_edges(self) -> list[tuple[str, str]]:
        # VIEWED and BOUGHT are distinct relationships, so a pair holding both yields two paths
        return [pair for rel in ("VIEWED", "BOUGHT") for pair in self.edges[rel]]

    async def query(self, cypher, params=None, read_only=False):
        params = params or {}
        self.queries.append(cypher)

        match = _INTERACTION_MERGE.search(cypher)
        if match:
            uid, pid = params["uid"], params["pid"]
            self.users.add(uid)
            name = params.get("name")
            self.products[pid] = name if name is not None else self.products.get(pid)
            if "category" in params:
                self.categories.add(params["category"])
                self.edges["HAS_CATEGORY"].add((pid, params["category"]))
            self.edges[match.group(1)].add((uid, pid))
            return []

        if "MERGE (u)-[f:FOLLOWS]->(a)" in cypher:
            self.users.update({params["follower"], params["artisan"]})
            self.edges["FOLLOWS"].add((params["follower"], params["artisan"]))
            return []

        if "DELETE f" in cypher:
            pair = (params["follower"], params["artisan"])
            if pair in self.edges["FOLLOWS"]:
                self.edges["FOLLOWS"].discard(pair)
                return [[1]]
            return [[0]]

        if "AS followers" in cypher:
            if params["artisan"] not in self.users:
                return []
            followers = sum(1 for _, a in self.edges["FOLLOWS"] if a == params["artisan"])
            following = (params["me"], params["artisan"]) in self.edges["FOLLOWS"]
            return [[followers, following]]

        if "RETURN u.id" in cypher:
            return [[u] for u in sorted(u for u, a in self.edges["FOLLOWS"] if a == params["artisan"])]

        if "AS score" in cypher:
            return self._recommend(params["uid"], params["lim"], "AND NOT (u)" in cypher)

        raise AssertionError(f"Unexpected query: {cypher}")

    async def scalar(self, cypher, params=None, read_only=False):
        rows = await self.query(cypher, params=params, read_only=read_only)
        return rows[0][0] if rows else None

    def _recommend(self, uid, limit, exclude_interacted):
        interactions = self._interaction_edges()
        scores: Counter = Counter()
        own = {p for u, p in interactions if u == uid}
        for u, p in interactions:
            if u != uid:
                continue
            for other, p2 in interactions:
                if p2 != p or other == uid:
                    continue
                for other2, rec in interactions:
                    if other2 != other or rec == p:
                        continue
                    if exclude_interacted and rec in own:
                        continue
                    scores[rec] += 1
        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        return [[pid, score] for pid, score in ranked[:limit]]


@pytest.fixture
def fake_graph():
    """In-memory graph client with MERGE semantics."""
    return FakeGraphClient()
