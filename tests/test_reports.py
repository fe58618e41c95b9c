import pytest

from conftest import transient_product
from core.reports import inventory_value_report, product_stock_value, stock_level, stock_level_report
from db.category import Category


def test_value_counts_main_and_variant_stock():
    product = transient_product(price="10", stock=2, variants=[("M", "red", 3)])
    assert product_stock_value(product) == 50


def test_inventory_value_groups_by_category():
    shirts = Category(name="Shirts")
    products = [
        transient_product(price="10", stock=2, variants=[("M", "red", 3)], category=shirts),
        transient_product(price="2.50", stock=4, category=shirts),
        transient_product(price="1.333", stock=3),
    ]

    report = inventory_value_report(products)

    assert report["product_count"] == 3
    assert report["total_value"] == 64.0
    assert report["categories"] == [
        {"category": "Shirts", "value": 60.0},
        {"category": "Uncategorized", "value": 4.0},
    ]


def test_inventory_value_rounds_to_cents():
    report = inventory_value_report([transient_product(price="0.335", stock=1)])
    assert report["total_value"] == 0.34


def test_inventory_value_empty():
    assert inventory_value_report([]) == {"total_value": 0.0, "categories": [], "product_count": 0}


@pytest.mark.parametrize(
    "stock, level",
    [
        (0, "Out of Stock"),
        (1, "Low Stock"),
        (5, "Low Stock"),
        (6, "Medium Stock"),
        (20, "Medium Stock"),
        (21, "High Stock"),
    ],
)
def test_stock_level_boundaries(stock, level):
    assert stock_level(stock) == level


def test_stock_level_report_buckets_and_stats():
    products = [
        transient_product("empty", stock=0, variants=[("M", "red", 4)]),
        transient_product("few", stock=5),
        transient_product("some", stock=6, variants=[("L", "red", 30)]),
        transient_product("lots", stock=21),
    ]

    report = stock_level_report(products)

    levels = {row["level"]: row for row in report["stock_levels"]}
    assert [row["level"] for row in report["stock_levels"]] == [
        "Out of Stock", "Low Stock", "Medium Stock", "High Stock",
    ]
    assert levels["Out of Stock"]["count"] == 1
    assert levels["Out of Stock"]["products"][0]["name"] == "empty"
    assert levels["Medium Stock"]["products"][0]["stock"] == 6
    assert report["stats"] == {
        "total_products": 4,
        "total_stock_items": 66,
        "avg_stock_per_product": 16.5,
        "max_stock": 30,
        "min_stock": 0,
    }


def test_stock_level_examples_are_capped_at_five():
    products = [transient_product(f"p{i}", stock=50) for i in range(8)]

    report = stock_level_report(products)

    high = report["stock_levels"][3]
    assert high["count"] == 8
    assert [p["name"] for p in high["products"]] == ["p0", "p1", "p2", "p3", "p4"]


def test_stock_level_report_with_no_products():
    stats = stock_level_report([])["stats"]
    assert stats == {
        "total_products": 0,
        "total_stock_items": 0,
        "avg_stock_per_product": 0.0,
        "max_stock": 0,
        "min_stock": 0,
    }
