import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_superuser
from core.inventory import load_product
from core.stock_queries import FETCH_ORDER
from db.category import Category as CategoryModel
from db.database import get_async_session
from db.product import Product as ProductModel, ProductVariant as ProductVariantModel
from db.users import User
from schemas.products import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_404(db: AsyncSession, product_id: UUID) -> ProductModel:
    product = await load_product(db, product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id {product_id} not found"
        )
    return product


async def _ensure_category(db: AsyncSession, category_id: Optional[UUID]) -> None:
    if category_id is None:
        return
    res = await db.execute(select(CategoryModel.id).where(CategoryModel.id == category_id))
    if res.scalar_one_or_none() is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category does not exist")


def _build_variants(variants) -> List[ProductVariantModel]:
    return [
        ProductVariantModel(size=v.size, color=v.color, stock=v.stock, position=i)
        for i, v in enumerate(variants)
    ]


@router.get("/", response_model=List[Dict])
async def list_products(
    category: Optional[UUID] = None,
    db: AsyncSession = Depends(get_async_session),
):
    """Get all products, optionally only one category"""
    stmt = select(ProductModel)
    if category:
        stmt = stmt.where(ProductModel.category_id == category)
    res = await db.execute(stmt.order_by(*FETCH_ORDER))
    return [p.to_schema for p in res.scalars().all()]


@router.get("/{product_id}", response_model=Dict)
async def get_product(product_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get a product by ID"""
    product = await _get_or_404(db, product_id)
    return product.to_schema


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    """Create a new product with its variants"""
    await _ensure_category(db, payload.category_id)
    product = ProductModel(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        stock=payload.stock,
        inventory_location=payload.inventory_location,
        inventory_status=payload.inventory_status,
        image=payload.image,
        category_id=payload.category_id,
        variants=_build_variants(payload.variants),
    )
    db.add(product)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("create_product failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error")
    product = await load_product(db, product.id)
    return product.to_schema


@router.put("/{product_id}", response_model=Dict)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    """Update fields that were sent; a variants list replaces the current one"""
    product = await _get_or_404(db, product_id)
    data = payload.model_dump(exclude_unset=True, exclude={"variants"})
    if "category_id" in data:
        await _ensure_category(db, data["category_id"])
    for field, value in data.items():
        if value is None and field in ("name", "price", "stock"):
            continue
        setattr(product, field, value)

    if payload.variants is not None:
        product.variants.clear()
        # flush the orphan deletes first so re-used (size, color) keys do not collide
        await db.flush()
        product.variants.extend(_build_variants(payload.variants))

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("update_product failed for %s", product_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error")
    product = await load_product(db, product.id)
    return product.to_schema


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a product; its variants go with it"""
    product = await _get_or_404(db, product_id)
    await db.delete(product)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
