import logging
from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_superuser
from db.category import Category as CategoryModel
from db.database import get_async_session
from db.product import Product as ProductModel
from db.users import User
from schemas.categories import CategoryCreate, CategoryRead, CategoryUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_NAME = "Category name already exists"


async def _get_or_404(db: AsyncSession, category_id: UUID) -> CategoryModel:
    res = await db.execute(select(CategoryModel).where(CategoryModel.id == category_id))
    category = res.scalar_one_or_none()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/", response_model=List[CategoryRead])
async def list_categories(db: AsyncSession = Depends(get_async_session)):
    res = await db.execute(select(CategoryModel).order_by(func.lower(CategoryModel.name).asc()))
    return [CategoryRead(**c.to_schema) for c in res.scalars().all()]


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: UUID, db: AsyncSession = Depends(get_async_session)):
    category = await _get_or_404(db, category_id)
    return CategoryRead(**category.to_schema)


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    category = CategoryModel(name=payload.name, description=payload.description)
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        # unique(name) is the only constraint a new row can break
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_NAME)
    await db.refresh(category)
    return CategoryRead(**category.to_schema)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    category = await _get_or_404(db, category_id)
    category.name = payload.name
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_NAME)
    await db.refresh(category)
    return CategoryRead(**category.to_schema)


@router.delete("/{category_id}", response_model=Dict)
async def delete_category(
    category_id: UUID,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    category = await _get_or_404(db, category_id)
    try:
        # Detach, never cascade: products keep living without a category.
        detached = await db.execute(
            update(ProductModel)
            .where(ProductModel.category_id == category_id)
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
        await db.delete(category)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("delete_category failed for %s", category_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error")

    logger.info("Deleted category %s, detached %s products", category_id, int(detached.rowcount or 0))
    return {"message": "Category deleted successfully and associated products updated"}
