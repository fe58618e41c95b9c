"""
Inventory reporting: stock value by category and stock-level distribution.

Both reports are pure functions over already-loaded products so they can be
computed (and tested) without a database.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

UNCATEGORIZED = "Uncategorized"
OUT_OF_STOCK = "Out of Stock"
LOW_STOCK = "Low Stock"
MEDIUM_STOCK = "Medium Stock"
HIGH_STOCK = "High Stock"
STOCK_LEVELS = (OUT_OF_STOCK, LOW_STOCK, MEDIUM_STOCK, HIGH_STOCK)
EXAMPLES_PER_LEVEL = 5

_CENTS = Decimal("0.01")


def _round2(value: Decimal) -> float:
    return float(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def product_stock_value(product) -> Decimal:
    """price * main stock + price * each variant's stock."""
    price = Decimal(str(product.price or 0))
    value = price * product.stock
    for variant in product.variants:
        value += price * variant.stock
    return value


def inventory_value_report(products: Iterable) -> Dict:
    total = Decimal(0)
    by_category: Dict[str, Decimal] = {}
    count = 0
    for product in products:
        count += 1
        value = product_stock_value(product)
        total += value
        name = product.category.name if product.category is not None else UNCATEGORIZED
        by_category[name] = by_category.get(name, Decimal(0)) + value

    return {
        "total_value": _round2(total),
        "categories": [{"category": name, "value": _round2(v)} for name, v in by_category.items()],
        "product_count": count,
    }


def stock_level(stock: int) -> str:
    if stock == 0:
        return OUT_OF_STOCK
    if stock <= 5:
        return LOW_STOCK
    if stock <= 20:
        return MEDIUM_STOCK
    return HIGH_STOCK


def stock_level_report(products: Iterable) -> Dict:
    levels = {level: {"count": 0, "products": []} for level in STOCK_LEVELS}
    total_products = 0
    total_stock = 0
    max_stock = 0
    min_stock = None

    for product in products:
        total_products += 1
        bucket = levels[stock_level(product.stock)]
        bucket["count"] += 1
        if len(bucket["products"]) < EXAMPLES_PER_LEVEL:
            bucket["products"].append({"id": product.id, "name": product.name, "stock": product.stock})

        # main stock and every variant stock form one sample set
        samples: List[int] = [product.stock] + [v.stock for v in product.variants]
        for s in samples:
            total_stock += s
            max_stock = max(max_stock, s)
            min_stock = s if min_stock is None else min(min_stock, s)

    avg = Decimal(total_stock) / total_products if total_products else Decimal(0)
    return {
        "stock_levels": [
            {"level": level, "count": data["count"], "products": data["products"]}
            for level, data in levels.items()
        ],
        "stats": {
            "total_products": total_products,
            "total_stock_items": total_stock,
            "avg_stock_per_product": _round2(avg),
            "max_stock": max_stock,
            "min_stock": min_stock if min_stock is not None else 0,
        },
    }
