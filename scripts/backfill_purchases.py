#!/usr/bin/env python3
"""Backfill BOUGHT edges from existing orders in MongoDB.

Scans the orders collection and records one purchase interaction per order
item, with product name and category taken from the products collection.
Uses the same MERGE path as live tracking, so it is safe to re-run.

This seeds the recommendation graph for orders placed before interaction
tracking was enabled.

Usage:
    MKT_MONGO_URI=mongodb://... MKT_FALKORDB_HOST=... \
        python scripts/backfill_purchases.py [--dry-run] [--batch-size N]
"""

import argparse
import asyncio
import logging
import time

from pymongo import AsyncMongoClient

from marketplace_graph.config import settings
from marketplace_graph.errors import StoreUnavailable
from marketplace_graph.graph.factory import create_graph_client
from marketplace_graph.graph.interactions import InteractionRecorder
from marketplace_graph.models.product import ProductRef
from marketplace_graph.storage.mongo_store import to_id_filter

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def backfill_purchases(batch_size: int, dry_run: bool) -> dict[str, int]:
    """Record a purchase for every (order user, order item) pair.

    Returns:
        Stats dict with scanned, recorded, skipped, errors counts.
    """
    mongo = AsyncMongoClient(
        settings.mongo.uri.get_secret_value(),
        serverSelectionTimeoutMS=settings.mongo.server_selection_timeout_ms,
    )
    db = mongo[settings.mongo.database]
    products = db[settings.mongo.products_collection]

    graph_client = None
    recorder = None
    if not dry_run:
        graph_client = await create_graph_client(settings.falkordb)
        recorder = InteractionRecorder(graph_client)

    stats = {"scanned": 0, "recorded": 0, "skipped": 0, "errors": 0}

    try:
        total = await db.orders.count_documents({})
        logger.info(f"Orders to scan: {total}")

        cursor = db.orders.find({}, {"userId": 1, "items": 1}).batch_size(batch_size)
        async for order in cursor:
            stats["scanned"] += 1
            user_id = order.get("userId")
            items = order.get("items") or []
            if user_id is None or not items:
                stats["skipped"] += 1
                continue

            product_ids = [str(item["productId"]) for item in items if item.get("productId")]
            catalog = {
                str(doc["_id"]): doc
                async for doc in products.find({"_id": {"$in": to_id_filter(product_ids)}}, {"name": 1, "category": 1})
            }

            for item in items:
                pid = item.get("productId")
                if not pid:
                    stats["skipped"] += 1
                    continue
                doc = catalog.get(str(pid), {})
                ref = ProductRef(
                    id=str(pid),
                    name=doc.get("name") or item.get("productName"),
                    category=doc.get("category"),
                )

                if dry_run:
                    logger.debug(f"[DRY RUN] Would record purchase: {user_id} -> {ref.id}")
                    stats["recorded"] += 1
                    continue

                try:
                    await recorder.record_purchase(str(user_id), ref)
                    stats["recorded"] += 1
                except StoreUnavailable as e:
                    logger.error(f"Failed to record purchase {user_id} -> {ref.id}: {e}")
                    stats["errors"] += 1

            if stats["scanned"] % batch_size == 0:
                logger.info(
                    f"Progress: {stats['scanned']}/{total} orders scanned, "
                    f"{stats['recorded']} recorded, {stats['errors']} errors"
                )
    finally:
        if graph_client is not None:
            await graph_client.close()
        await mongo.close()

    return stats


def main():
    parser = argparse.ArgumentParser(description="Backfill BOUGHT edges from MongoDB orders")
    parser.add_argument("--dry-run", action="store_true", help="Preview without writing to FalkorDB")
    parser.add_argument("--batch-size", type=int, default=100, help="Mongo cursor batch size (default: 100)")
    args = parser.parse_args()

    if args.dry_run:
        logger.info("=== DRY RUN MODE ===")

    start = time.monotonic()
    stats = asyncio.run(backfill_purchases(batch_size=args.batch_size, dry_run=args.dry_run))
    elapsed = time.monotonic() - start

    logger.info(f"Done in {elapsed:.1f}s: {stats}")


if __name__ == "__main__":
    main()
