# Copyright 2024 Heinrich Krupp
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Interaction tracking and recommendation endpoints for the HTTP interface.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from ...errors import InvalidOperation, StoreUnavailable
from ...models.graph import InteractionType
from ...models.product import ProductRef
from ...services.marketplace_service import MarketplaceGraphService
from ..dependencies import get_marketplace_service

router = APIRouter(prefix="/recommendations", tags=["recommendations"])
logger = logging.getLogger(__name__)


class TrackRequest(BaseModel):
    """Request model for recording a user/product interaction."""

    user_id: str = Field(..., min_length=1, description="Interacting user")
    product_id: str = Field(..., min_length=1, description="Product document ID")
    name: str | None = Field(None, description="Product display name")
    category: str | None = Field(None, description="Product category")
    action: InteractionType = Field(InteractionType.VIEW, description="'view' or 'purchase'")

    @field_validator("user_id", "product_id")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TrackResponse(BaseModel):
    """Response model for interaction tracking."""

    message: str
    recorded: bool


class RecommendationResponse(BaseModel):
    """Response model for a user's recommendations."""

    products: list[dict[str, Any]]
    total: int


@router.post("/track", response_model=TrackResponse)
async def track_interaction(
    request: TrackRequest,
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> TrackResponse:
    """
    Record a view or purchase. Tracking is best-effort: a graph failure is
    reported as ``recorded=false`` rather than an error status.
    """
    product = ProductRef(id=request.product_id, name=request.name, category=request.category)
    recorded = await service.track_interaction(request.user_id, product, request.action)
    message = "Interaction tracked" if recorded else "Interaction not recorded"
    return TrackResponse(message=message, recorded=recorded)


@router.get("/{user_id}", response_model=RecommendationResponse)
async def get_recommendations(
    user_id: str,
    limit: int | None = Query(None, ge=1, description="Maximum number of products"),
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> RecommendationResponse:
    """Recommended products for a user, ranked by co-interaction paths."""
    try:
        scored = await service.recommend_products_scored(user_id, limit)
    except InvalidOperation as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StoreUnavailable as e:
        logger.error(f"Recommendation failed for user {user_id}: {e}")
        raise HTTPException(status_code=503, detail=f"Recommendation unavailable: {e.reason}") from e

    return RecommendationResponse(
        products=[{**p.model_dump(mode="json", by_alias=True), "score": score} for p, score in scored],
        total=len(scored),
    )
