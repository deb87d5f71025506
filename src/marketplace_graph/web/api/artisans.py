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
Follow/unfollow and follower endpoints for artisans.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...errors import InvalidOperation, StoreUnavailable
from ...models.graph import ArtisanStats
from ...services.marketplace_service import MarketplaceGraphService
from ..dependencies import get_marketplace_service

router = APIRouter(prefix="/artisans", tags=["artisans"])
logger = logging.getLogger(__name__)


class FollowRequest(BaseModel):
    """Request model for follow/unfollow."""

    follower_id: str = Field(..., min_length=1, description="User doing the following")


class FollowResponse(BaseModel):
    """Response model for follow/unfollow."""

    success: bool
    message: str
    changed: bool = True


class FollowersResponse(BaseModel):
    """Response model for an artisan's followers."""

    artisan_id: str
    followers: list[str]
    total: int


def _store_error(e: StoreUnavailable) -> HTTPException:
    logger.error(f"Social graph operation failed: {e}")
    return HTTPException(status_code=503, detail=f"Graph store unavailable: {e.reason}")


@router.post("/{artisan_id}/follow", response_model=FollowResponse)
async def follow_artisan(
    artisan_id: str,
    request: FollowRequest,
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> FollowResponse:
    try:
        await service.follow_artisan(request.follower_id, artisan_id)
    except InvalidOperation as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StoreUnavailable as e:
        raise _store_error(e) from e

    return FollowResponse(success=True, message=f"Now following {artisan_id}")


@router.delete("/{artisan_id}/follow", response_model=FollowResponse)
async def unfollow_artisan(
    artisan_id: str,
    request: FollowRequest,
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> FollowResponse:
    """Unfollow; succeeds even when no follow existed."""
    try:
        removed = await service.unfollow_artisan(request.follower_id, artisan_id)
    except InvalidOperation as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StoreUnavailable as e:
        raise _store_error(e) from e

    message = f"Unfollowed {artisan_id}" if removed else f"Was not following {artisan_id}"
    return FollowResponse(success=True, message=message, changed=removed)


@router.get("/{artisan_id}/stats", response_model=ArtisanStats)
async def get_artisan_stats(
    artisan_id: str,
    current_user_id: str | None = None,
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> ArtisanStats:
    try:
        return await service.get_artisan_stats(artisan_id, current_user_id)
    except StoreUnavailable as e:
        raise _store_error(e) from e


@router.get("/{artisan_id}/followers", response_model=FollowersResponse)
async def get_followers(
    artisan_id: str,
    service: MarketplaceGraphService = Depends(get_marketplace_service),
) -> FollowersResponse:
    try:
        followers = await service.get_followers(artisan_id)
    except StoreUnavailable as e:
        raise _store_error(e) from e

    return FollowersResponse(artisan_id=artisan_id, followers=followers, total=len(followers))
