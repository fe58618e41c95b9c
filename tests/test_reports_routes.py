async def test_inventory_value_report(client, make_product, make_category):
    shirts = await make_category("Shirts")
    await make_product("Tee", price="10", stock=2, variants=[("M", "red", 3)], category=shirts)
    await make_product("Gift card", price="25", stock=1)

    resp = await client.get("/reports/inventory-value")

    assert resp.status_code == 200
    assert resp.json() == {
        "total_value": 75.0,
        "categories": [
            {"category": "Shirts", "value": 50.0},
            {"category": "Uncategorized", "value": 25.0},
        ],
        "product_count": 2,
    }


async def test_stock_level_report(client, make_product):
    await make_product("out", stock=0)
    await make_product("low", stock=5)
    await make_product("medium", stock=6, variants=[("M", "red", 40)])
    await make_product("high", stock=21)

    resp = await client.get("/reports/stock-levels")

    body = resp.json()
    assert [(row["level"], row["count"]) for row in body["stock_levels"]] == [
        ("Out of Stock", 1),
        ("Low Stock", 1),
        ("Medium Stock", 1),
        ("High Stock", 1),
    ]
    assert body["stock_levels"][2]["products"][0]["name"] == "medium"
    assert body["stats"] == {
        "total_products": 4,
        "total_stock_items": 72,
        "avg_stock_per_product": 18.0,
        "max_stock": 40,
        "min_stock": 0,
    }


async def test_low_stock_alert_report(client, make_product):
    await make_product("variant-3", stock=30, variants=[("M", "red", 3)])
    await make_product("main-4", stock=4)
    await make_product("sold-out", stock=0, variants=[("M", "red", 0)])
    await make_product("main-1", stock=1, variants=[("L", "red", 2), ("M", "red", 9)])
    await make_product("variant-2", stock=50, variants=[("M", "red", 2)])

    resp = await client.get("/reports/low-stock")

    body = resp.json()
    assert body["threshold"] == 5
    assert body["count"] == 4
    assert [p["name"] for p in body["products"]] == ["main-1", "main-4", "variant-2", "variant-3"]
    main_1 = body["products"][0]
    assert main_1["main_stock"] == {"quantity": 1, "is_low": True}
    assert main_1["low_variants"] == [{"size": "L", "color": "red", "stock": 2}]


async def test_low_stock_alert_custom_threshold(client, make_product):
    await make_product("eight", stock=8)
    body = (await client.get("/reports/low-stock", params={"threshold": 10})).json()
    assert body["threshold"] == 10
    assert [p["name"] for p in body["products"]] == ["eight"]


async def test_reports_require_authentication(anon_client):
    assert (await anon_client.get("/reports/stock-levels")).status_code == 401
