from typing import Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_superuser
from core.config import settings
from core.reports import inventory_value_report, stock_level_report
from core.stock_queries import FETCH_ORDER, find_low_stock_alerts, parse_threshold
from db.database import get_async_session
from db.product import Product as ProductModel
from db.users import User

router = APIRouter()


async def _all_products(db: AsyncSession):
    res = await db.execute(select(ProductModel).order_by(*FETCH_ORDER))
    return res.scalars().all()


@router.get("/inventory-value", response_model=Dict)
async def inventory_value(
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    return inventory_value_report(await _all_products(db))


@router.get("/stock-levels", response_model=Dict)
async def stock_levels(
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    return stock_level_report(await _all_products(db))


@router.get("/low-stock", response_model=Dict)
async def low_stock_alert(
    threshold: Optional[str] = None,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Low-stock alert: products with 0 < stock <= threshold on the main stock or any variant.

    Sorted most urgent first.
    """
    limit = parse_threshold(threshold, settings.low_stock_alert_threshold)
    alerts = await find_low_stock_alerts(db, limit)
    return {"products": alerts, "count": len(alerts), "threshold": limit}
