from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_superuser
from db.database import get_async_session
from db.users import User

router = APIRouter()


@router.get("/users", response_model=List[Dict])
async def list_users(
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    res = await db.execute(select(User).order_by(User.email.asc()))
    return [u.to_schema for u in res.scalars().all()]


@router.delete("/users/{user_id}", response_model=Dict)
async def delete_user(
    user_id: UUID,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session),
):
    res = await db.execute(select(User).where(User.id == user_id))
    target = res.scalar_one_or_none()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    await db.delete(target)
    await db.commit()
    return {"message": "User deleted successfully"}
