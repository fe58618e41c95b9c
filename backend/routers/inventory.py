import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_superuser
from core.config import settings
from core.inventory import reconcile_batch, reconcile_product
from core.stock_queries import FETCH_ORDER, find_low_stock, parse_threshold
from db.database import get_async_session
from db.product import Product as ProductModel
from db.users import User
from schemas.inventory import BulkInventoryUpdate, InventoryUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


# Registered before "/{product_id}" so the literal path wins.
@router.put("/bulk-update", response_model=Dict)
async def bulk_update_inventory(
    payload: BulkInventoryUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    if payload.updates is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid updates format")

    try:
        results = await reconcile_batch(db, payload.updates)
    except Exception:
        await db.rollback()
        logger.exception("bulk_update_inventory failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error")

    return {"results": [r.model_dump(exclude_none=True) for r in results]}


@router.put("/{product_id}", response_model=Dict)
async def update_inventory(
    product_id: UUID,
    payload: InventoryUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        product = await reconcile_product(db, product_id, payload)
    except Exception:
        await db.rollback()
        logger.exception("update_inventory failed for %s", product_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error")

    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product.to_schema


@router.get("/", response_model=List[Dict])
async def list_inventory(
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    res = await db.execute(select(ProductModel).order_by(*FETCH_ORDER))
    return [p.to_inventory_schema for p in res.scalars().all()]


@router.get("/low-stock", response_model=List[Dict])
@router.get("/low-stock/{threshold}", response_model=List[Dict])
async def list_low_stock(
    threshold: Optional[str] = None,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Products whose main stock or any variant stock is below the threshold.

    A product low on both counts is listed once; main-stock matches come first.
    """
    limit = parse_threshold(threshold, settings.low_stock_threshold)
    products = await find_low_stock(db, limit)
    return [p.to_inventory_schema for p in products]
