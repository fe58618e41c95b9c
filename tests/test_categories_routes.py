import uuid

from sqlalchemy import select

from db.category import Category
from db.product import Product


async def test_create_and_list_categories(client):
    resp = await client.post("/categories/", json={"name": "  Shoes ", "description": "Footwear"})
    assert resp.status_code == 201
    assert resp.json()["name"] == "Shoes"

    await client.post("/categories/", json={"name": "Apparel"})
    resp = await client.get("/categories/")
    assert [c["name"] for c in resp.json()] == ["Apparel", "Shoes"]


async def test_duplicate_category_name_is_bad_request(client, make_category):
    await make_category("Shoes")

    resp = await client.post("/categories/", json={"name": "Shoes"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Category name already exists"


async def test_get_category(client, make_category):
    shoes = await make_category("Shoes")
    assert (await client.get(f"/categories/{shoes.id}")).json()["name"] == "Shoes"
    assert (await client.get(f"/categories/{uuid.uuid4()}")).status_code == 404


async def test_rename_category(client, make_category):
    shoes = await make_category("Shoes")
    await make_category("Hats")

    resp = await client.put(f"/categories/{shoes.id}", json={"name": "Footwear"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Footwear"

    clash = await client.put(f"/categories/{shoes.id}", json={"name": "Hats"})
    assert clash.status_code == 400
    assert clash.json()["detail"] == "Category name already exists"

    missing = await client.put(f"/categories/{uuid.uuid4()}", json={"name": "Caps"})
    assert missing.status_code == 404


async def test_invalid_category_id_is_bad_request(client):
    resp = await client.put("/categories/not-an-id", json={"name": "Caps"})
    assert resp.status_code == 400


async def test_delete_category_detaches_products(client, make_category, make_product, session_maker):
    shoes = await make_category("Shoes")
    hats = await make_category("Hats")
    boot = await make_product("Boot", category=shoes)
    cap = await make_product("Cap", category=hats)

    resp = await client.delete(f"/categories/{shoes.id}")

    assert resp.status_code == 200
    async with session_maker() as session:
        products = {p.name: p for p in (await session.execute(select(Product))).scalars().all()}
        remaining = (await session.execute(select(Category.name))).scalars().all()
    assert set(products) == {"Boot", "Cap"}
    assert products["Boot"].id == boot.id
    assert products["Boot"].category_id is None
    assert products["Cap"].category_id == cap.category_id == hats.id
    assert remaining == ["Hats"]


async def test_delete_unknown_category(client):
    resp = await client.delete(f"/categories/{uuid.uuid4()}")
    assert resp.status_code == 404


async def test_category_writes_require_authentication(anon_client):
    resp = await anon_client.post("/categories/", json={"name": "Shoes"})
    assert resp.status_code == 401
