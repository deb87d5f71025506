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
Product store factory.

Creates and initializes the MongoDB product store.
"""

import logging

from ..config import MongoSettings
from .base import ProductStore
from .mongo_store import MongoProductStore

logger = logging.getLogger(__name__)


async def create_product_store(config: MongoSettings) -> ProductStore:
    """
    Create and initialize the MongoDB product store.

    Returns:
        Initialized MongoProductStore instance
    """
    logger.info("Creating MongoDB product store instance...")

    store = MongoProductStore(
        uri=config.uri.get_secret_value(),
        database=config.database,
        collection=config.products_collection,
        server_selection_timeout_ms=config.server_selection_timeout_ms,
    )
    await store.initialize()

    return store
