"""
Tests for product and category routes.
"""
import pytest
from sqlalchemy import select

from gaia.models import Category, ProductColor


class TestProducts:

    @pytest.mark.asyncio
    async def test_list_products(self, client, seeded):
        resp = await client.get("/api/products")

        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["totalItems"] == 8
        assert body["pagination"]["perPage"] == 10
        assert len(body["products"]) == 8

    @pytest.mark.asyncio
    async def test_filter_by_category(self, client, seeded):
        resp = await client.get("/api/products", params={"category": "Lips"})

        names = {p["name"] for p in resp.json()["products"]}
        assert names == {"Plush Warm Beige Lipstick", "Glossy Lip Oil"}

    @pytest.mark.asyncio
    async def test_search_matches_description(self, client, seeded):
        resp = await client.get("/api/products", params={"search": "jasmine"})

        assert [p["name"] for p in resp.json()["products"]] == ["Citrus Blossom Perfume"]

    @pytest.mark.asyncio
    async def test_product_detail(self, client, seeded):
        resp = await client.get("/api/products/1")

        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "Plush Warm Beige Lipstick"
        assert body["primaryImage"] == "/uploads/products/product-lipstick-beige.jpg"
        assert len(body["images"]) == 3
        assert [c["name"] for c in body["colors"]] == ["Pink", "Silver", "Beige", "Coral"]
        assert body["howToUse"].startswith("Start by outlining")

    @pytest.mark.asyncio
    async def test_missing_product(self, client, seeded):
        resp = await client.get("/api/products/999")

        assert resp.status_code == 404
        assert resp.json() == {"message": "Product not found"}

    @pytest.mark.asyncio
    async def test_create_product_requires_admin(self, client, seeded, customer_headers):
        resp = await client.post(
            "/api/products", json={"name": "X", "category": "Lips", "price": 10}, headers=customer_headers
        )

        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_create_product_updates_category_count(self, client, db, seeded, admin_headers):
        resp = await client.post(
            "/api/products",
            json={
                "name": "Kohl Pencil",
                "category": "Eyes",
                "price": 199,
                "originalPrice": 299,
                "colors": [{"name": "Black", "value": "#000000"}],
            },
            headers=admin_headers,
        )

        assert resp.status_code == 201
        assert resp.json()["message"] == "Product created successfully"

        detail = (await client.get(f"/api/products/{resp.json()['id']}")).json()
        assert detail["inventoryStatus"] == "in-stock"
        assert detail["colors"][0]["value"] == "#000000"
        assert detail["images"] == []

        eyes = await db.scalar(select(Category).where(Category.name == "Eyes"))
        assert eyes.product_count == 2

    @pytest.mark.asyncio
    async def test_create_product_validation(self, client, seeded, admin_headers):
        resp = await client.post("/api/products", json={"name": "No price"}, headers=admin_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Name, category, and price are required"

    @pytest.mark.asyncio
    async def test_update_replaces_colors_only_when_sent(self, client, db, seeded, admin_headers):
        base = {"name": "Glossy Lip Oil", "category": "Lips", "price": 349}

        resp = await client.put("/api/products/6", json=base, headers=admin_headers)
        assert resp.status_code == 200
        colors = (await db.execute(select(ProductColor.name).where(ProductColor.product_id == 6))).scalars().all()
        assert sorted(colors) == ["Coral", "Pink"]

        await client.put(
            "/api/products/6", json={**base, "colors": [{"name": "Berry", "value": "#8E4585"}]}, headers=admin_headers
        )
        colors = (await db.execute(select(ProductColor.name).where(ProductColor.product_id == 6))).scalars().all()
        assert colors == ["Berry"]

        detail = (await client.get("/api/products/6")).json()
        assert detail["price"] == 349

    @pytest.mark.asyncio
    async def test_delete_product(self, client, db, seeded, admin_headers):
        resp = await client.delete("/api/products/8", headers=admin_headers)

        assert resp.status_code == 200
        assert (await client.get("/api/products/8")).status_code == 404
        fragrance = await db.scalar(select(Category).where(Category.name == "Fragrance"))
        assert fragrance.product_count == 0


class TestCategories:

    @pytest.mark.asyncio
    async def test_list_categories_with_counts(self, client, seeded):
        resp = await client.get("/api/categories")

        assert resp.status_code == 200
        counts = {c["name"]: c["productCount"] for c in resp.json()}
        assert counts["Face"] == 3
        assert counts["Lips"] == 2
        assert counts["Makeup"] == 0

    @pytest.mark.asyncio
    async def test_category_products_sorted_by_price(self, client, seeded):
        categories = (await client.get("/api/categories")).json()
        face = next(c for c in categories if c["name"] == "Face")

        resp = await client.get(f"/api/categories/{face['id']}/products", params={"sort": "price-asc"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["category"] == "Face"
        assert [p["price"] for p in body["products"]] == [449, 599, 799]
        assert body["pagination"]["perPage"] == 12

    @pytest.mark.asyncio
    async def test_create_duplicate_category(self, client, seeded, admin_headers):
        resp = await client.post("/api/categories", json={"name": "Lips"}, headers=admin_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Category with this name already exists"

    @pytest.mark.asyncio
    async def test_create_update_delete_category(self, client, seeded, admin_headers):
        created = await client.post(
            "/api/categories", json={"name": "Nails", "imagePath": "/uploads/categories/nails.jpg"}, headers=admin_headers
        )
        assert created.status_code == 201
        category_id = created.json()["id"]

        updated = await client.put(f"/api/categories/{category_id}", json={"name": "Nail Care"}, headers=admin_headers)
        assert updated.json()["name"] == "Nail Care"
        assert updated.json()["imagePath"] == "/uploads/categories/nails.jpg"

        deleted = await client.delete(f"/api/categories/{category_id}", headers=admin_headers)
        assert deleted.status_code == 200
        assert (await client.get(f"/api/categories/{category_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_delete_category_with_products(self, client, seeded, admin_headers):
        categories = (await client.get("/api/categories")).json()
        lips = next(c for c in categories if c["name"] == "Lips")

        resp = await client.delete(f"/api/categories/{lips['id']}", headers=admin_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Cannot delete category with associated products"
