"""
Tests for authentication and user account routes.
"""
import pytest
from sqlalchemy import select

from gaia.core.security import verify_password
from gaia.models import User, UserAddress


class TestRegisterAndLogin:

    @pytest.mark.asyncio
    async def test_register_returns_token(self, client, db):
        resp = await client.post(
            "/api/auth/register",
            json={"name": "Meera", "email": "meera@example.com", "password": "secret1"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["email"] == "meera@example.com"
        assert body["role"] == "customer"
        assert body["token"]
        assert "password" not in body

        user = await db.scalar(select(User).where(User.email == "meera@example.com"))
        assert user.password != "secret1"
        assert verify_password("secret1", user.password)

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client, customer):
        resp = await client.post(
            "/api/auth/register",
            json={"name": "Dup", "email": customer.email, "password": "secret1"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Email already in use"}

    @pytest.mark.asyncio
    async def test_register_requires_all_fields(self, client):
        resp = await client.post("/api/auth/register", json={"email": "x@example.com"})

        assert resp.status_code == 400
        assert resp.json()["message"] == "All fields are required"

    @pytest.mark.asyncio
    async def test_login_and_me(self, client, customer):
        login = await client.post(
            "/api/auth/login", json={"email": customer.email, "password": "password123"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json() == {"id": customer.id, "name": customer.name, "email": customer.email, "role": "customer"}

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, customer):
        resp = await client.post("/api/auth/login", json={"email": customer.email, "password": "nope"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid email or password"}

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client):
        resp = await client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})

        assert resp.status_code == 401


class TestChangePassword:

    @pytest.mark.asyncio
    async def test_change_password(self, client, session_factory, customer, customer_headers):
        resp = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "password123", "newPassword": "newsecret"},
            headers=customer_headers,
        )

        assert resp.status_code == 200
        assert resp.json() == {"message": "Password changed successfully"}
        async with session_factory() as session:
            user = await session.get(User, customer.id)
            assert verify_password("newsecret", user.password)

    @pytest.mark.asyncio
    async def test_short_new_password(self, client, customer_headers):
        resp = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "password123", "newPassword": "abc"},
            headers=customer_headers,
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "New password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_wrong_current_password_on_auth_route(self, client, customer_headers):
        resp = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": "newsecret"},
            headers=customer_headers,
        )

        assert resp.status_code == 401
        assert resp.json()["message"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_wrong_current_password_on_profile_route(self, client, customer_headers):
        resp = await client.post(
            "/api/users/change-password",
            json={"currentPassword": "wrong", "newPassword": "newsecret"},
            headers=customer_headers,
        )

        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_short_password_on_profile_route(self, client, customer_headers):
        resp = await client.post(
            "/api/users/change-password",
            json={"currentPassword": "password123", "newPassword": "abc"},
            headers=customer_headers,
        )

        assert resp.status_code == 400
        assert resp.json()["message"] == "Password must be at least 6 characters"


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, client, customer, customer_headers):
        resp = await client.get("/api/users/profile", headers=customer_headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["email"] == customer.email
        assert "createdAt" in body
        assert "password" not in body

    @pytest.mark.asyncio
    async def test_update_profile(self, client, customer_headers):
        resp = await client.put(
            "/api/users/profile", json={"name": "Asha R", "phone": "9876543210"}, headers=customer_headers
        )

        assert resp.status_code == 200
        assert resp.json()["name"] == "Asha R"
        assert resp.json()["phone"] == "9876543210"

    @pytest.mark.asyncio
    async def test_update_profile_requires_name(self, client, customer_headers):
        resp = await client.put("/api/users/profile", json={"phone": "1"}, headers=customer_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Name is required"


ADDRESS = {
    "name": "Home",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "postalCode": "560001",
    "country": "India",
    "phone": "9876543210",
}


class TestAddresses:

    @pytest.mark.asyncio
    async def test_add_and_list(self, client, customer_headers):
        created = await client.post("/api/users/addresses", json=ADDRESS, headers=customer_headers)

        assert created.status_code == 201
        assert created.json()["postalCode"] == "560001"
        assert created.json()["isDefault"] is False

        listed = await client.get("/api/users/addresses", headers=customer_headers)
        assert [a["id"] for a in listed.json()] == [created.json()["id"]]

    @pytest.mark.asyncio
    async def test_new_default_replaces_old_default(self, client, db, customer_headers):
        first = await client.post(
            "/api/users/addresses", json={**ADDRESS, "isDefault": True}, headers=customer_headers
        )
        second = await client.post(
            "/api/users/addresses", json={**ADDRESS, "name": "Office", "isDefault": True}, headers=customer_headers
        )

        listed = (await client.get("/api/users/addresses", headers=customer_headers)).json()

        defaults = [a["id"] for a in listed if a["isDefault"]]
        assert defaults == [second.json()["id"]]
        assert listed[0]["id"] == second.json()["id"]
        assert first.json()["id"] in [a["id"] for a in listed]

    @pytest.mark.asyncio
    async def test_deleting_default_promotes_oldest(self, client, db, customer_headers):
        first = await client.post("/api/users/addresses", json=ADDRESS, headers=customer_headers)
        second = await client.post(
            "/api/users/addresses", json={**ADDRESS, "isDefault": True}, headers=customer_headers
        )

        resp = await client.delete(f"/api/users/addresses/{second.json()['id']}", headers=customer_headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Address deleted successfully"}
        promoted = await db.get(UserAddress, first.json()["id"])
        assert promoted.is_default is True

    @pytest.mark.asyncio
    async def test_incomplete_address(self, client, customer_headers):
        resp = await client.post("/api/users/addresses", json={"name": "Home"}, headers=customer_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "All address fields are required"

    @pytest.mark.asyncio
    async def test_cannot_touch_someone_elses_address(self, client, other_customer, customer_headers, headers_for):
        created = await client.post("/api/users/addresses", json=ADDRESS, headers=headers_for(other_customer))

        resp = await client.put(
            f"/api/users/addresses/{created.json()['id']}", json=ADDRESS, headers=customer_headers
        )

        assert resp.status_code == 404
        assert resp.json()["message"] == "Address not found or not owned by user"


class TestPaymentMethods:

    @pytest.mark.asyncio
    async def test_add_list_delete(self, client, customer_headers):
        card = {"cardType": "visa", "lastFour": "4242", "expiryMonth": "12", "expiryYear": "29", "isDefault": True}

        created = await client.post("/api/users/payment-methods", json=card, headers=customer_headers)
        assert created.status_code == 201
        assert created.json()["lastFour"] == "4242"

        listed = await client.get("/api/users/payment-methods", headers=customer_headers)
        assert len(listed.json()) == 1

        deleted = await client.delete(
            f"/api/users/payment-methods/{created.json()['id']}", headers=customer_headers
        )
        assert deleted.status_code == 200

        listed = await client.get("/api/users/payment-methods", headers=customer_headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_missing_fields(self, client, customer_headers):
        resp = await client.post("/api/users/payment-methods", json={"cardType": "visa"}, headers=customer_headers)

        assert resp.status_code == 400


class TestAdminUsers:

    @pytest.mark.asyncio
    async def test_admin_lists_users(self, client, customer, admin_headers):
        resp = await client.get("/api/users", headers=admin_headers)

        assert resp.status_code == 200
        assert customer.email in [u["email"] for u in resp.json()]

    @pytest.mark.asyncio
    async def test_customer_cannot_list_users(self, client, customer_headers):
        resp = await client.get("/api/users", headers=customer_headers)

        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_gets_missing_user(self, client, admin_headers):
        resp = await client.get("/api/users/999", headers=admin_headers)

        assert resp.status_code == 404
        assert resp.json() == {"message": "User not found"}
