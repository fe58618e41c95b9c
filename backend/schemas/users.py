# Pydantic schemas for user-related requests/responses
# fastapi-users provides the base schemas; the catalog adds a display name.

from pydantic import Field
from uuid import UUID
from fastapi_users import schemas
from typing import Optional


class UserRead(schemas.BaseUser[UUID]):
    name: Optional[str] = None


class UserCreate(schemas.BaseUserCreate):
    name: Optional[str] = Field(None, max_length=50)


class UserUpdate(schemas.BaseUserUpdate):
    name: Optional[str] = Field(None, max_length=50)
