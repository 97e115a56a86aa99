"""
Order Service

Order placement, reads, cancellation, guest tracking and the admin views.

Placement is one transaction on the request session: the header row is
flushed to obtain its id, every line item is flushed as a single batch, then
the transaction commits. Any database failure rolls the whole order back.
Totals are stored as submitted by the storefront; prices and stock are not
re-validated here.
"""
import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gaia.core.config import settings
from gaia.core.database import utcnow
from gaia.core.exceptions import (
    NotFoundError,
    OrderPersistenceError,
    OrderStateError,
    ValidationError,
)
from gaia.models.order import Order, OrderItem, OrderStatus, CANCELLABLE_STATUSES
from gaia.models.product import Product
from gaia.models.promo_code import PromoCode
from gaia.models.user import User
from gaia.schemas.common import Pagination
from gaia.schemas.order import GuestOrderCreate, OrderCreate

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "ORD-"
DEFAULT_PAGE_SIZE = 10
TOP_PRODUCTS_LIMIT = 5
STATS_DEFAULT_DAYS = 30

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def format_order_number(order_id: int) -> str:
    """42 -> 'ORD-000042'. Ids above 999999 keep all their digits."""
    return f"{ORDER_NUMBER_PREFIX}{order_id:06d}"


def parse_order_number(order_number: str) -> Optional[int]:
    """
    Recover the order id from a display number.

    The first 'ORD-' is removed and the leading integer of the remainder is
    taken, so 'ORD-000042' and '42' both give 42. Returns None when no
    integer can be read.
    """
    match = _LEADING_INT.match(order_number.replace(ORDER_NUMBER_PREFIX, "", 1))
    if not match:
        return None
    return int(match.group(1))


def _iso_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds") + "Z"


def _format_amount(value: float) -> str:
    return f"{value:g}"


def _line_item(item: OrderItem, with_category: bool = False) -> Dict[str, Any]:
    product = item.product
    data = {
        "id": item.id,
        "order_id": item.order_id,
        "product_id": item.product_id,
        "product_name": product.name if product else None,
        "image": product.primary_image if product else None,
        "quantity": item.quantity,
        "price": item.price,
        "color": item.color,
    }
    if with_category:
        data["category"] = product.category if product else None
    return data


def _order_summary(order: Order) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "subtotal": order.subtotal,
        "discount": order.discount or 0,
        "shipping_cost": order.shipping_cost or 0,
        "total": order.total,
        "created_at": order.created_at,
        "items": [_line_item(item) for item in order.items],
    }


class OrderService:
    """Order workflow against one database session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # Placement
    # ============================================================

    @staticmethod
    def _check_payload(payload: OrderCreate) -> None:
        if not payload.items:
            raise ValidationError("Order must contain at least one item")
        if payload.shipping_address is None:
            raise ValidationError("Shipping address is required")

    async def create_order(self, payload: OrderCreate, user: User) -> Dict[str, Any]:
        """Place an order for an authenticated customer."""
        self._check_payload(payload)
        return await self._place_order(payload, user_id=user.id)

    async def create_guest_order(self, payload: GuestOrderCreate) -> Dict[str, Any]:
        """
        Place an order without a session.

        When the guest email belongs to a registered account the order is
        attached to that account; the guest email and name are kept either way.
        """
        if not payload.user_info or not payload.user_info.email:
            raise ValidationError("User email is required")
        self._check_payload(payload)

        email = payload.user_info.email
        user_id = await self.db.scalar(select(User.id).where(User.email == email))

        return await self._place_order(
            payload,
            user_id=user_id,
            guest_email=email,
            guest_name=payload.user_info.name or None,
        )

    async def _place_order(
        self,
        payload: OrderCreate,
        user_id: Optional[int],
        guest_email: Optional[str] = None,
        guest_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        discount = payload.discount or 0
        shipping_cost = payload.shipping_cost or 0
        # An explicit empty billing object is stored as sent
        billing_address = (
            payload.billing_address if payload.billing_address is not None else payload.shipping_address
        )

        order = Order(
            user_id=user_id,
            guest_email=guest_email,
            guest_name=guest_name,
            status=OrderStatus.PENDING.value,
            subtotal=payload.subtotal,
            discount=discount,
            shipping_cost=shipping_cost,
            total=payload.total,
            shipping_address=payload.shipping_address,
            billing_address=billing_address,
            payment_method=payload.payment_method,
        )

        try:
            self.db.add(order)
            await self.db.flush()  # Get order ID

            self.db.add_all([
                OrderItem(
                    order_id=order.id,
                    product_id=line.id,
                    quantity=line.quantity,
                    price=line.price,
                    color=line.selected_color or None,
                )
                for line in payload.items
            ])
            await self.db.flush()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Order placement rolled back ({len(payload.items)} items): {e}")
            raise OrderPersistenceError(
                "Failed to place order",
                details={"user_id": user_id, "guest_email": guest_email},
            ) from e

        logger.info(
            f"Order {order.order_number} placed "
            f"({'user ' + str(user_id) if user_id else 'guest'}, {len(payload.items)} items, total {payload.total})"
        )

        return {
            "id": order.id,
            "order_number": order.order_number,
            "status": order.status,
            "subtotal": payload.subtotal,
            "discount": discount,
            "shipping_cost": shipping_cost,
            "total": payload.total,
            "created_at": _iso_timestamp(order.created_at),
        }

    # ============================================================
    # Customer reads
    # ============================================================

    async def list_user_orders(self, user: User, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Dict[str, Any]:
        """Newest first, with line items."""
        total_items = await self.db.scalar(
            select(func.count(Order.id)).where(Order.user_id == user.id)
        )
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user.id)
            .options(
                selectinload(Order.items)
                .selectinload(OrderItem.product)
                .selectinload(Product.images)
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        orders = result.scalars().all()

        return {
            "pagination": Pagination.build(page, limit, total_items or 0),
            "orders": [_order_summary(order) for order in orders],
        }

    async def get_user_order(self, order_id: int, user: User) -> Dict[str, Any]:
        """Single order owned by `user`. Orders owned by someone else are reported as missing."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id, Order.user_id == user.id)
            .options(
                selectinload(Order.items)
                .selectinload(OrderItem.product)
                .selectinload(Product.images)
            )
        )
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError("Order not found")

        data = _order_summary(order)
        data.update({
            "user_id": order.user_id,
            "guest_email": order.guest_email,
            "guest_name": order.guest_name,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "payment_method": order.payment_method,
            "cancellation_reason": order.cancellation_reason,
            "updated_at": order.updated_at,
            "items": [_line_item(item, with_category=True) for item in order.items],
        })
        return data

    async def cancel_order(self, order_id: int, user: User, reason: Optional[str] = None) -> Dict[str, Any]:
        order = await self.db.scalar(
            select(Order).where(Order.id == order_id, Order.user_id == user.id)
        )
        if not order:
            raise NotFoundError("Order not found")

        if order.status not in CANCELLABLE_STATUSES:
            raise OrderStateError(
                "Order cannot be cancelled. Only pending or processing orders can be cancelled.",
                order_id=order.id,
                status=order.status,
            )

        order.status = OrderStatus.CANCELLED.value
        order.cancellation_reason = reason or None
        await self.db.commit()

        logger.info(f"Order {order.order_number} cancelled by user {user.id}")
        return {"message": "Order cancelled successfully", "order_id": order.id, "status": order.status}

    async def track_order(self, order_number: Optional[str], email: Optional[str]) -> Dict[str, Any]:
        """Public lookup by display number plus the email used at checkout or on the account."""
        if not order_number or not email:
            raise ValidationError("Order number and email are required")

        order_id = parse_order_number(order_number)
        if order_id is None:
            raise ValidationError("Invalid order number format")

        order = await self.db.scalar(
            select(Order).where(
                Order.id == order_id,
                or_(
                    Order.guest_email == email,
                    Order.user_id.in_(select(User.id).where(User.email == email)),
                ),
            )
        )
        if not order:
            raise NotFoundError("Order not found or email does not match")

        address = order.shipping_address or {}
        return {
            "order_number": order_number,
            "status": order.status,
            "created_at": order.created_at,
            "total": order.total,
            "shipping_address": {
                "name": address.get("name"),
                "city": address.get("city"),
                "state": address.get("state"),
                "country": address.get("country"),
            },
        }

    # ============================================================
    # Admin
    # ============================================================

    async def list_all_orders(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        query = (
            select(Order, User.name, User.email)
            .outerjoin(User, Order.user_id == User.id)
        )
        count_query = select(func.count(Order.id))
        if status:
            query = query.where(Order.status == status)
            count_query = count_query.where(Order.status == status)

        total_items = await self.db.scalar(count_query)
        result = await self.db.execute(
            query.order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )

        orders = []
        for order, user_name, user_email in result.all():
            orders.append({
                "id": order.id,
                "order_number": order.order_number,
                "user_id": order.user_id,
                "guest_email": order.guest_email,
                "guest_name": order.guest_name,
                "user_name": user_name,
                "user_email": user_email,
                "status": order.status,
                "subtotal": order.subtotal,
                "discount": order.discount or 0,
                "shipping_cost": order.shipping_cost or 0,
                "total": order.total,
                "created_at": order.created_at,
            })

        return {
            "pagination": Pagination.build(page, limit, total_items or 0),
            "orders": orders,
        }

    async def update_status(self, order_id: int, status: Optional[str]) -> Dict[str, Any]:
        valid_statuses = {s.value for s in OrderStatus}
        if status not in valid_statuses:
            raise ValidationError("Invalid status value")

        order = await self.db.get(Order, order_id)
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        order.status = status
        await self.db.commit()

        logger.info(f"Order {order.order_number} status {previous} -> {status}")
        return {"message": "Order status updated successfully", "order_id": order.id, "status": status}

    async def get_stats(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
        """Totals, status counts, top products and a daily series for an inclusive date range."""
        try:
            end = date.fromisoformat(end_date[:10]) if end_date else datetime.now(timezone.utc).date()
            start = date.fromisoformat(start_date[:10]) if start_date else end - timedelta(days=STATS_DEFAULT_DAYS)
        except ValueError:
            raise ValidationError("Invalid date format, expected YYYY-MM-DD")

        start_str, end_str = start.isoformat(), end.isoformat()
        order_day = func.date(Order.created_at)
        in_range = order_day.between(start_str, end_str)

        totals = (await self.db.execute(
            select(func.count(Order.id), func.sum(Order.total)).where(in_range)
        )).one()

        status_rows = await self.db.execute(
            select(Order.status, func.count(Order.id))
            .where(in_range)
            .group_by(Order.status)
            .order_by(Order.status)
        )

        total_quantity = func.sum(OrderItem.quantity).label("total_quantity")
        top_rows = await self.db.execute(
            select(
                OrderItem.product_id,
                Product.name,
                func.count(OrderItem.id),
                total_quantity,
            )
            .join(Product, OrderItem.product_id == Product.id)
            .join(Order, OrderItem.order_id == Order.id)
            .where(in_range)
            .group_by(OrderItem.product_id, Product.name)
            .order_by(total_quantity.desc())
            .limit(TOP_PRODUCTS_LIMIT)
        )

        daily_rows = await self.db.execute(
            select(order_day, func.count(Order.id), func.sum(Order.total))
            .where(in_range)
            .group_by(order_day)
            .order_by(order_day)
        )

        return {
            "period": {"start_date": start_str, "end_date": end_str},
            "totals": {"orders": totals[0] or 0, "revenue": totals[1] or 0},
            "orders_by_status": [{"status": s, "count": c} for s, c in status_rows.all()],
            "top_products": [
                {"product_id": pid, "name": name, "order_count": count, "total_quantity": qty}
                for pid, name, count, qty in top_rows.all()
            ],
            "daily_stats": [
                {"date": day, "order_count": count, "revenue": revenue or 0}
                for day, count, revenue in daily_rows.all()
            ],
        }

    # ============================================================
    # Promo codes & shipping
    # ============================================================

    async def validate_promo_code(self, code: Optional[str]) -> Dict[str, Any]:
        """
        Check a promo code. Minimum purchase and maximum discount are not
        applied here; the storefront owns discount arithmetic.
        """
        if not code:
            raise ValidationError("Promo code is required")

        now = utcnow()
        promo = await self.db.scalar(
            select(PromoCode).where(
                PromoCode.code == code.upper(),
                or_(PromoCode.expires_at.is_(None), PromoCode.expires_at > now),
                or_(PromoCode.max_uses.is_(None), PromoCode.uses < PromoCode.max_uses),
            )
        )
        if not promo:
            raise NotFoundError("Invalid or expired promo code")

        if promo.discount_type == "percentage":
            label = f"{_format_amount(promo.discount_value)}%"
        else:
            label = f"{settings.CURRENCY_SYMBOL}{_format_amount(promo.discount_value)}"

        return {
            "valid": True,
            "code": promo.code,
            "discount_type": promo.discount_type,
            "discount_value": promo.discount_value,
            "message": f"{label} discount applied",
        }


def quote_shipping(
    postal_code: Optional[str],
    country: Optional[str],
    items: Optional[List[Any]],
    subtotal: Optional[float],
) -> Dict[str, Any]:
    """Flat rate shipping, free from FREE_SHIPPING_THRESHOLD upwards."""
    if not postal_code or not country or items is None:
        raise ValidationError("Postal code, country, and items are required")

    shipping_cost = settings.FLAT_SHIPPING_COST
    if (subtotal or 0) >= settings.FREE_SHIPPING_THRESHOLD:
        shipping_cost = 0

    return {
        "shipping_cost": shipping_cost,
        "currency": settings.CURRENCY,
        "free_shipping_threshold": settings.FREE_SHIPPING_THRESHOLD,
        "estimated_delivery": settings.ESTIMATED_DELIVERY,
    }
