"""
Inventory reconciliation.

Applies partial stock / location / status / variant updates to products,
one at a time or as a batch where every item succeeds or fails on its own.
"""

import logging
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.product import Product as ProductModel, ProductVariant as ProductVariantModel
from schemas.inventory import BatchItemResult, BulkInventoryItem, InventoryUpdate

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"


def _parse_uuid(raw) -> Optional[UUID]:
    if raw is None:
        return None
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        return None


def merge_variants(product: ProductModel, deltas) -> None:
    """Merge variant deltas into product.variants keyed by (size, color).

    A matching variant gets the delta's stock; anything else is appended.
    """
    by_key = {v.key: v for v in product.variants}
    for delta in deltas:
        key = (delta.size, delta.color)
        existing = by_key.get(key)
        if existing is not None:
            existing.stock = delta.stock
            continue
        variant = ProductVariantModel(
            size=delta.size,
            color=delta.color,
            stock=delta.stock,
            position=len(product.variants),
        )
        product.variants.append(variant)
        by_key[key] = variant


def apply_inventory_update(product: ProductModel, update: InventoryUpdate) -> ProductModel:
    # stock is checked for None so 0 is a real value; location/status are
    # checked for truthiness so "" leaves the field alone.
    if update.stock is not None:
        product.stock = update.stock
    if update.location:
        product.inventory_location = update.location
    if update.status:
        product.inventory_status = update.status
    if update.variants:
        merge_variants(product, update.variants)
    return product


async def load_product(db: AsyncSession, product_id) -> Optional[ProductModel]:
    pid = _parse_uuid(product_id)
    if pid is None:
        return None
    # populate_existing so a reload after commit also refreshes variants and category
    res = await db.execute(
        select(ProductModel)
        .where(ProductModel.id == pid)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def reconcile_product(db: AsyncSession, product_id, update: InventoryUpdate) -> Optional[ProductModel]:
    """Apply one update and persist it with a single commit. None if the product is absent."""
    product = await load_product(db, product_id)
    if product is None:
        return None
    apply_inventory_update(product, update)
    await db.commit()
    return await load_product(db, product.id)


async def reconcile_batch(db: AsyncSession, updates: Iterable[BulkInventoryItem]) -> List[BatchItemResult]:
    """Reconcile each item independently; a missing product is recorded, not raised."""
    results: List[BatchItemResult] = []
    for item in updates:
        product = await reconcile_product(db, item.product_id, item)
        if product is None:
            logger.info("bulk inventory update skipped %s: %s", item.product_id, PRODUCT_NOT_FOUND)
            results.append(BatchItemResult(id=item.product_id, success=False, message=PRODUCT_NOT_FOUND))
            continue
        results.append(BatchItemResult(id=item.product_id, success=True))
    return results
