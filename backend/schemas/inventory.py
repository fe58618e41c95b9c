from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class VariantStock(BaseModel):
    """Variant delta: (size, color) is the key, stock is the full new value."""
    size: str
    color: str
    stock: int = Field(..., ge=0)

    @field_validator("size", "color")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class InventoryUpdate(BaseModel):
    stock: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    status: Optional[str] = None
    variants: Optional[List[VariantStock]] = None


class BulkInventoryItem(InventoryUpdate):
    # Optional plain string: a missing or non-UUID id is reported as "not found" for that item only.
    product_id: Optional[str] = None


class BulkInventoryUpdate(BaseModel):
    updates: Optional[List[BulkInventoryItem]] = None


class BatchItemResult(BaseModel):
    id: Optional[str] = None
    success: bool
    message: Optional[str] = None
