"""
Stock queries: low-stock sets, low-stock alerts and faceted product search.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.product import Product as ProductModel, ProductVariant as ProductVariantModel

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

SORT_ORDERS = {
    "price_asc": (ProductModel.price.asc(),),
    "price_desc": (ProductModel.price.desc(),),
    "name_asc": (ProductModel.name.asc(),),
    "newest": (ProductModel.created_at.desc(),),
}
DEFAULT_SORT = "newest"

# Fetch order for unsorted listings.
FETCH_ORDER = (ProductModel.created_at.asc(), ProductModel.name.asc())


def _contains(term: str) -> str:
    """LIKE pattern for a literal substring."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def parse_threshold(raw, default: int) -> int:
    """Leading-integer parse; absent, garbage or 0 falls back to default."""
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw or default
    m = _LEADING_INT.match(str(raw))
    if not m:
        return default
    return int(m.group(1)) or default


def merge_unique(*groups: Iterable[ProductModel]) -> List[ProductModel]:
    """Concatenate groups keeping the first occurrence of every product id."""
    seen = set()
    out: List[ProductModel] = []
    for group in groups:
        for product in group:
            if product.id in seen:
                continue
            seen.add(product.id)
            out.append(product)
    return out


# -- low stock ---------------------------------------------------------------

def split_low_stock(products: Sequence[ProductModel], threshold: int) -> List[ProductModel]:
    """Primary-stock matches first, then variant matches, deduplicated."""
    primary = [p for p in products if p.stock < threshold]
    by_variant = [p for p in products if any(v.stock < threshold for v in p.variants)]
    return merge_unique(primary, by_variant)


async def find_low_stock(db: AsyncSession, threshold: int) -> List[ProductModel]:
    # One OR query instead of two separate ones, so a concurrent write cannot
    # slip between the main-stock and variant-stock reads.
    stmt = (
        select(ProductModel)
        .where(
            or_(
                ProductModel.stock < threshold,
                ProductModel.variants.any(ProductVariantModel.stock < threshold),
            )
        )
        .order_by(*FETCH_ORDER)
    )
    res = await db.execute(stmt)
    return split_low_stock(res.scalars().all(), threshold)


def _is_alert_low(stock: int, threshold: int) -> bool:
    return 0 < stock <= threshold


def build_low_stock_alert(product: ProductModel, threshold: int) -> Dict:
    return {
        "id": product.id,
        "name": product.name,
        "main_stock": {
            "quantity": product.stock,
            "is_low": _is_alert_low(product.stock, threshold),
        },
        "low_variants": [
            v.to_schema for v in product.variants if _is_alert_low(v.stock, threshold)
        ],
        "category": product.category_ref,
        "price": float(product.price) if product.price is not None else None,
        "image": product.image,
    }


def _alert_sort_key(alert: Dict):
    if alert["main_stock"]["is_low"]:
        return (0, alert["main_stock"]["quantity"])
    if alert["low_variants"]:
        return (1, min(v["stock"] for v in alert["low_variants"]))
    return (2, 0)


def sort_low_stock_alerts(alerts: List[Dict]) -> List[Dict]:
    """Low main stock by quantity, then variant-only by lowest variant, then the rest.

    Stable, so ties keep fetch order.
    """
    return sorted(alerts, key=_alert_sort_key)


async def find_low_stock_alerts(db: AsyncSession, threshold: int) -> List[Dict]:
    stmt = (
        select(ProductModel)
        .where(
            or_(
                and_(ProductModel.stock <= threshold, ProductModel.stock > 0),
                ProductModel.variants.any(
                    and_(ProductVariantModel.stock <= threshold, ProductVariantModel.stock > 0)
                ),
            )
        )
        .order_by(*FETCH_ORDER)
    )
    res = await db.execute(stmt)
    products = res.scalars().all()
    primary = [p for p in products if _is_alert_low(p.stock, threshold)]
    alerts = [build_low_stock_alert(p, threshold) for p in merge_unique(primary, products)]
    return sort_low_stock_alerts(alerts)


# -- search ------------------------------------------------------------------

def variant_clause(size: Optional[str] = None, color: Optional[str] = None, in_stock: Optional[bool] = None):
    """EXISTS clause for one variant matching every supplied field."""
    conds = []
    if size:
        conds.append(ProductVariantModel.size == size)
    if color:
        conds.append(ProductVariantModel.color == color)
    if in_stock is True:
        conds.append(ProductVariantModel.stock > 0)
    return ProductModel.variants.any(and_(*conds))


@dataclass
class ProductSearchFilter:
    keyword: Optional[str] = None
    category_id: Optional[UUID] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock: Optional[bool] = None
    size: Optional[str] = None
    color: Optional[str] = None

    def clauses(self) -> list:
        clauses = []
        if self.keyword:
            pattern = _contains(self.keyword)
            clauses.append(
                or_(
                    ProductModel.name.ilike(pattern, escape="\\"),
                    ProductModel.description.ilike(pattern, escape="\\"),
                )
            )
        if self.category_id is not None:
            clauses.append(ProductModel.category_id == self.category_id)
        if self.min_price is not None:
            clauses.append(ProductModel.price >= self.min_price)
        if self.max_price is not None:
            clauses.append(ProductModel.price <= self.max_price)
        if self.in_stock is True:
            clauses.append(ProductModel.stock > 0)
        elif self.in_stock is False:
            clauses.append(ProductModel.stock == 0)
        if self.size or self.color:
            clauses.append(variant_clause(self.size, self.color, self.in_stock))
        return clauses

    def apply(self, stmt):
        clauses = self.clauses()
        if clauses:
            stmt = stmt.where(and_(*clauses))
        return stmt


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


async def search_products(
    db: AsyncSession,
    filters: ProductSearchFilter,
    sort_by: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict:
    order = SORT_ORDERS.get(sort_by or DEFAULT_SORT, SORT_ORDERS[DEFAULT_SORT])
    stmt = filters.apply(select(ProductModel)).order_by(*order, ProductModel.name.asc())
    stmt = stmt.offset((page - 1) * limit).limit(limit)
    res = await db.execute(stmt)
    products = res.scalars().all()

    count_stmt = filters.apply(select(func.count()).select_from(ProductModel))
    total = int((await db.execute(count_stmt)).scalar_one())
    pages = page_count(total, limit)
    return {
        "products": [p.to_schema for p in products],
        "page": page,
        "pages": pages,
        "total": total,
        "has_more": page < pages,
    }


async def suggest_products(db: AsyncSession, term: Optional[str], limit: int = 5) -> List[Dict]:
    if not term or len(term) < 2:
        return []
    res = await db.execute(
        select(ProductModel.id, ProductModel.name)
        .where(ProductModel.name.ilike(_contains(term), escape="\\"))
        .order_by(ProductModel.name.asc())
        .limit(limit)
    )
    return [{"id": pid, "name": name} for pid, name in res.all()]


async def search_by_variant(
    db: AsyncSession,
    size: Optional[str] = None,
    color: Optional[str] = None,
    in_stock: Optional[bool] = None,
) -> List[ProductModel]:
    res = await db.execute(
        select(ProductModel)
        .where(variant_clause(size, color, in_stock))
        .order_by(*FETCH_ORDER)
    )
    return list(res.scalars().all())
