"""Value types returned by the interaction graph components."""

from enum import Enum

from pydantic import BaseModel, Field


class InteractionType(str, Enum):
    """User → Product interaction kinds and the edge each one writes."""

    VIEW = "view"
    PURCHASE = "purchase"

    @property
    def relation(self) -> str:
        return _INTERACTION_RELATIONS[self]


_INTERACTION_RELATIONS = {
    InteractionType.VIEW: "VIEWED",
    InteractionType.PURCHASE: "BOUGHT",
}


class Recommendation(BaseModel):
    """A candidate product and the number of co-interaction paths reaching it."""

    product_id: str
    score: int = Field(..., ge=1, description="Traversal path multiplicity")


class ArtisanStats(BaseModel):
    """Follower statistics for an artisan, from a viewer's perspective."""

    followers: int = 0
    is_following: bool = False
