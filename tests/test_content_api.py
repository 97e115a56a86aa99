"""
Tests for site content routes.
"""
import pytest


class TestContent:

    @pytest.mark.asyncio
    async def test_grouped_content(self, client, seeded):
        resp = await client.get("/api/content")

        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {"hero", "limited_editions", "category", "about", "footer"}
        assert body["hero"]["discount"]["value"] == "25-50% OFF"
        assert body["hero"]["image"]["type"] == "image"

    @pytest.mark.asyncio
    async def test_section(self, client, seeded):
        resp = await client.get("/api/content/section/footer")

        assert resp.status_code == 200
        assert resp.json()["phone"]["value"] == "+91 1234567890"

    @pytest.mark.asyncio
    async def test_unknown_section_is_empty(self, client, seeded):
        resp = await client.get("/api/content/section/nothing")

        assert resp.status_code == 200
        assert resp.json() == {}

    @pytest.mark.asyncio
    async def test_add_update_delete(self, client, seeded, admin_headers):
        created = await client.post(
            "/api/content", json={"section": "hero", "key": "subtitle", "value": "New season"}, headers=admin_headers
        )
        assert created.status_code == 201
        assert created.json()["type"] == "text"
        content_id = created.json()["id"]

        updated = await client.put(f"/api/content/{content_id}", json={"value": "Fresh looks"}, headers=admin_headers)
        assert updated.json() == {"message": "Content updated successfully", "id": content_id}

        hero = (await client.get("/api/content/section/hero")).json()
        assert hero["subtitle"] == {"value": "Fresh looks", "type": "text", "id": content_id}

        deleted = await client.delete(f"/api/content/{content_id}", headers=admin_headers)
        assert deleted.status_code == 200
        hero = (await client.get("/api/content/section/hero")).json()
        assert "subtitle" not in hero

    @pytest.mark.asyncio
    async def test_duplicate_section_key(self, client, seeded, admin_headers):
        resp = await client.post(
            "/api/content", json={"section": "hero", "key": "title", "value": "Again"}, headers=admin_headers
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "Content with this section and key already exists"

    @pytest.mark.asyncio
    async def test_update_requires_value(self, client, seeded, admin_headers):
        resp = await client.put("/api/content/1", json={}, headers=admin_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Content value is required"

    @pytest.mark.asyncio
    async def test_writes_require_admin(self, client, seeded, customer_headers):
        resp = await client.delete("/api/content/1", headers=customer_headers)

        assert resp.status_code == 403


class TestAppEndpoints:

    @pytest.mark.asyncio
    async def test_welcome(self, client):
        resp = await client.get("/api")

        assert resp.status_code == 200
        assert "GAIA" in resp.json()["message"]

    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_message_body(self, client):
        resp = await client.get("/api/nope")

        assert resp.status_code == 404
        assert resp.json() == {"message": "Not Found"}

    @pytest.mark.asyncio
    async def test_malformed_body_is_bad_request(self, client, customer_headers):
        resp = await client.post("/api/orders", content="not json", headers={**customer_headers, "Content-Type": "application/json"})

        assert resp.status_code == 400
        assert "message" in resp.json()
