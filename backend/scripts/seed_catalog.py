"""
Seed a small demo catalog: a few categories and products with size/color variants.

Run locally (from backend/):
  PYTHONPATH=. python scripts/seed_catalog.py

Idempotent: categories and products are matched by name (case-insensitive).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select

from core.logging import configure_logging
from db.category import Category
from db.database import async_session_maker, create_db_and_tables
from db.product import Product, ProductVariant

logger = logging.getLogger("scripts.seed_catalog")


@dataclass(frozen=True)
class SeedProduct:
    name: str
    price: str
    stock: int
    category: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    # (size, color, stock)
    variants: tuple = field(default_factory=tuple)


SEED_CATEGORIES = ["Apparel", "Footwear", "Accessories"]

SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct(
        name="Classic T-Shirt",
        price="19.99",
        stock=0,
        category="Apparel",
        description="Cotton crew neck tee",
        location="A-01-02",
        variants=(("S", "white", 12), ("M", "white", 3), ("L", "black", 25)),
    ),
    SeedProduct(
        name="Hoodie",
        price="49.00",
        stock=4,
        category="Apparel",
        description="Fleece hoodie with front pocket",
        location="A-02-01",
        variants=(("M", "grey", 2), ("L", "grey", 0)),
    ),
    SeedProduct(
        name="Running Shoes",
        price="89.50",
        stock=18,
        category="Footwear",
        description="Lightweight running shoes",
        location="B-04-07",
        variants=(("42", "blue", 6), ("43", "blue", 1)),
    ),
    SeedProduct(name="Canvas Tote", price="12.00", stock=40, category="Accessories"),
    SeedProduct(name="Gift Card", price="25.00", stock=100),
]


async def main() -> None:
    await create_db_and_tables()
    async with async_session_maker() as db:
        categories: dict[str, Category] = {}
        for name in SEED_CATEGORIES:
            res = await db.execute(select(Category).where(func.lower(Category.name) == name.lower()))
            cat = res.scalar_one_or_none()
            if cat is None:
                cat = Category(name=name)
                db.add(cat)
            categories[name] = cat
        await db.flush()

        created = 0
        for seed in SEED_PRODUCTS:
            res = await db.execute(select(Product.id).where(func.lower(Product.name) == seed.name.lower()))
            if res.scalar_one_or_none() is not None:
                continue
            db.add(
                Product(
                    name=seed.name,
                    description=seed.description,
                    price=Decimal(seed.price),
                    stock=seed.stock,
                    inventory_location=seed.location,
                    category=categories.get(seed.category) if seed.category else None,
                    variants=[
                        ProductVariant(size=size, color=color, stock=stock, position=i)
                        for i, (size, color, stock) in enumerate(seed.variants)
                    ],
                )
            )
            created += 1

        await db.commit()
        logger.info("Seeded %s categories, %s new products", len(categories), created)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
