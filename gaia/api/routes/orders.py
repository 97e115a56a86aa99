"""
Order routes

Public: guest checkout, tracking, promo code check, shipping quote.
Customer: place, list, view and cancel own orders.
Admin: list every order, statistics, status updates.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_client_ip, get_current_admin, get_current_user
from gaia.core.audit_log import ACTION_ORDER_STATUS, log_admin_action
from gaia.core.database import get_db
from gaia.models.user import User
from gaia.schemas.order import (
    AdminOrderList,
    CancelRequest,
    GuestOrderCreate,
    OrderCreate,
    OrderCreated,
    OrderDetail,
    OrderList,
    OrderStats,
    OrderStatusChanged,
    PromoCodeRequest,
    PromoCodeResult,
    ShippingQuote,
    ShippingQuoteRequest,
    StatusUpdate,
    TrackedOrder,
)
from gaia.services.order_service import DEFAULT_PAGE_SIZE, OrderService, quote_shipping

router = APIRouter()


# ============================================================================
# PUBLIC
# ============================================================================

@router.post("/guest", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_guest_order(data: GuestOrderCreate, db: AsyncSession = Depends(get_db)):
    """Place an order without an account"""
    return await OrderService(db).create_guest_order(data)


@router.get("/track", response_model=TrackedOrder)
async def track_order(
    order_number: Optional[str] = Query(None, alias="orderNumber"),
    email: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await OrderService(db).track_order(order_number, email)


@router.post("/promo-code/validate", response_model=PromoCodeResult)
async def validate_promo_code(data: PromoCodeRequest, db: AsyncSession = Depends(get_db)):
    return await OrderService(db).validate_promo_code(data.code)


@router.post("/shipping/calculate", response_model=ShippingQuote)
async def calculate_shipping(data: ShippingQuoteRequest):
    return quote_shipping(data.postal_code, data.country, data.items, data.subtotal)


# ============================================================================
# CUSTOMER
# ============================================================================

@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Place an order from the submitted cart"""
    return await OrderService(db).create_order(data, user)


@router.get("", response_model=OrderList)
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get current user's orders, newest first"""
    return await OrderService(db).list_user_orders(user, page, limit)


@router.get("/latest", response_model=OrderList)
async def latest_orders(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """First page of the current user's orders"""
    return await OrderService(db).list_user_orders(user)


# ============================================================================
# ADMIN
# ============================================================================

@router.get("/admin/orders", response_model=AdminOrderList)
async def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    order_status: Optional[str] = Query(None, alias="status"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await OrderService(db).list_all_orders(page, limit, order_status)


@router.get("/admin/orders/stats", response_model=OrderStats)
async def order_stats(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Defaults to the last 30 days"""
    return await OrderService(db).get_stats(start_date, end_date)


@router.put("/{order_id}/status", response_model=OrderStatusChanged)
async def update_order_status(
    order_id: int,
    data: StatusUpdate,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    result = await OrderService(db).update_status(order_id, data.status)
    log_admin_action(
        action=ACTION_ORDER_STATUS,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="order",
        resource_id=order_id,
        details={"status": data.status},
        ip_address=get_client_ip(request),
    )
    return result


# ============================================================================
# SINGLE ORDER
# ============================================================================

@router.get("/{order_id}", response_model=OrderDetail)
async def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get single order"""
    return await OrderService(db).get_user_order(order_id, user)


@router.put("/{order_id}/cancel", response_model=OrderStatusChanged)
async def cancel_order(
    order_id: int,
    data: Optional[CancelRequest] = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    reason = data.reason if data else None
    return await OrderService(db).cancel_order(order_id, user, reason)
