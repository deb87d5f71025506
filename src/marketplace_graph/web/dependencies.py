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
FastAPI dependencies for the HTTP interface.
"""

import logging

from fastapi import Depends, HTTPException, Request

from ..resources import MarketplaceResources
from ..services.marketplace_service import MarketplaceGraphService

logger = logging.getLogger(__name__)


def get_resources(request: Request) -> MarketplaceResources | None:
    """Resources created by the app lifespan, if any."""
    return getattr(request.app.state, "resources", None)


def get_marketplace_service(
    resources: MarketplaceResources | None = Depends(get_resources),
) -> MarketplaceGraphService:
    """Get a MarketplaceGraphService bound to the process resources."""
    if resources is None or not resources.is_initialized():
        raise HTTPException(status_code=503, detail="Graph store not initialized")
    return resources.build_service()
