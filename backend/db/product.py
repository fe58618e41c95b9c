import uuid
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)  # main stock
    inventory_location = Column(String, nullable=True)
    inventory_status = Column(String, nullable=True)
    image = Column(String, nullable=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    category = relationship("Category", back_populates="products", lazy="selectin")
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.position",
        lazy="selectin",
    )

    @property
    def category_ref(self):
        return self.category.to_ref if self.category is not None else None

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "stock": self.stock,
            "inventory_location": self.inventory_location,
            "inventory_status": self.inventory_status,
            "image": self.image,
            "category": self.category_ref,
            "variants": [v.to_schema for v in self.variants],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @property
    def to_inventory_schema(self):
        """Inventory projection: name, stock, variants, location, status, category, price."""
        return {
            "id": self.id,
            "name": self.name,
            "stock": self.stock,
            "variants": [v.to_schema for v in self.variants],
            "inventory_location": self.inventory_location,
            "inventory_status": self.inventory_status,
            "category": self.category_ref,
            "price": float(self.price) if self.price is not None else None,
        }


class ProductVariant(Base):
    """Per size/color stock record owned by a product."""
    __tablename__ = "product_variants"
    __table_args__ = (
        UniqueConstraint("product_id", "size", "color", name="ux_product_variants_product_size_color"),
        CheckConstraint("stock >= 0", name="ck_product_variants_stock_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    size = Column(String, nullable=False)
    color = Column(String, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    # Keeps the array order of the embedded variant list stable.
    position = Column(Integer, nullable=False, default=0)

    product = relationship("Product", back_populates="variants")

    @property
    def key(self):
        return (self.size, self.color)

    @property
    def to_schema(self):
        return {"size": self.size, "color": self.color, "stock": self.stock}
