from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.stock_queries import ProductSearchFilter, search_by_variant, search_products, suggest_products
from db.database import get_async_session

router = APIRouter()


@router.get("/", response_model=Dict)
async def search(
    keyword: Optional[str] = None,
    category: Optional[UUID] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    in_stock: Optional[bool] = None,
    size: Optional[str] = None,
    color: Optional[str] = None,
    sort_by: Optional[str] = Query(None, description="price_asc | price_desc | newest | name_asc"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
):
    """Search products by keyword, category, price, availability and variant attributes."""
    filters = ProductSearchFilter(
        keyword=keyword,
        category_id=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        size=size,
        color=color,
    )
    return await search_products(db, filters, sort_by=sort_by, page=page, limit=limit)


@router.get("/suggestions", response_model=List[Dict])
async def suggestions(
    term: Optional[str] = None,
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_async_session),
):
    return await suggest_products(db, term, limit=limit)


@router.get("/variants", response_model=List[Dict])
async def search_variants(
    size: Optional[str] = None,
    color: Optional[str] = None,
    in_stock: Optional[bool] = None,
    db: AsyncSession = Depends(get_async_session),
):
    if not size and not color:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide at least size or color",
        )
    products = await search_by_variant(db, size=size, color=color, in_stock=in_stock)
    return [p.to_schema for p in products]
