from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from schemas.inventory import VariantStock


def _check_unique_variants(variants: Optional[List[VariantStock]]) -> None:
    if not variants:
        return
    seen = set()
    for v in variants:
        if (v.size, v.color) in seen:
            raise ValueError(f"duplicate variant size={v.size!r} color={v.color!r}")
        seen.add((v.size, v.color))


class ProductCreate(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    inventory_location: Optional[str] = None
    inventory_status: Optional[str] = None
    image: Optional[str] = None
    category_id: Optional[UUID] = None
    variants: List[VariantStock] = []

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @model_validator(mode="after")
    def _unique_variants(self):
        _check_unique_variants(self.variants)
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    inventory_location: Optional[str] = None
    inventory_status: Optional[str] = None
    image: Optional[str] = None
    category_id: Optional[UUID] = None
    # Replaces the whole variant list when given.
    variants: Optional[List[VariantStock]] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @model_validator(mode="after")
    def _unique_variants(self):
        _check_unique_variants(self.variants)
        return self
