"""Typed wrappers over the storefront endpoints used by the client."""
import logging
from typing import Any, Dict, Optional

from gaia.client.api import ApiClient
from gaia.client.session import normalize_user

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, api: ApiClient):
        self.api = api
        self.session = api.session

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/auth/register", {"name": name, "email": email, "password": password})
        self._remember(data)
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.post("/auth/login", {"email": email, "password": password})
        self._remember(data)
        return data

    def _remember(self, data: Dict[str, Any]) -> None:
        token = data.get("token")
        if token:
            user = {k: v for k, v in data.items() if k != "token"}
            self.session.login(token, user)

    def logout(self) -> None:
        self.session.clear()

    async def get_current_user(self) -> Optional[Dict[str, Any]]:
        data = await self.api.get("/auth/me")
        user = normalize_user(data)
        if user:
            self.session.set_user(user)
        return user

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return await self.api.post(
            "/auth/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
        )

    async def update_profile(self, name: str, phone: Optional[str] = None) -> Dict[str, Any]:
        data = await self.api.put("/users/profile", {"name": name, "phone": phone})
        if self.session.user:
            self.session.set_user({**self.session.user, **data})
        return data


class OrderService:
    def __init__(self, api: ApiClient):
        self.api = api

    # =========================================================================
    # CUSTOMER
    # =========================================================================

    async def get_user_orders(self, page: int = 1, limit: Optional[int] = None) -> Dict[str, Any]:
        return await self.api.get("/orders", {"page": page, "limit": limit})

    async def get_order(self, order_id: int) -> Dict[str, Any]:
        return await self.api.get(f"/orders/{order_id}")

    async def get_latest_orders(self) -> Dict[str, Any]:
        return await self.api.get("/orders/latest")

    async def create_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return await self.api.post("/orders", order)

    async def guest_checkout(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return await self.api.post("/orders/guest", order)

    async def cancel_order(self, order_id: int, reason: Optional[str] = None) -> Dict[str, Any]:
        return await self.api.put(f"/orders/{order_id}/cancel", {"reason": reason})

    async def track_order(self, order_number: str, email: str) -> Dict[str, Any]:
        return await self.api.get("/orders/track", {"orderNumber": order_number, "email": email})

    async def validate_promo_code(self, code: str) -> Dict[str, Any]:
        return await self.api.post("/orders/promo-code/validate", {"code": code})

    async def calculate_shipping(self, postal_code: str, country: str, items: list, subtotal: float) -> Dict[str, Any]:
        return await self.api.post(
            "/orders/shipping/calculate",
            {"postalCode": postal_code, "country": country, "items": items, "subtotal": subtotal},
        )

    # =========================================================================
    # ADMIN
    # =========================================================================

    async def get_all_orders(
        self, page: int = 1, limit: Optional[int] = None, status: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.api.get("/orders/admin/orders", {"page": page, "limit": limit, "status": status})

    async def get_order_stats(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
        return await self.api.get("/orders/admin/orders/stats", {"startDate": start_date, "endDate": end_date})

    async def update_order_status(self, order_id: int, status: str) -> Dict[str, Any]:
        return await self.api.put(f"/orders/{order_id}/status", {"status": status})
