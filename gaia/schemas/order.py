"""
Order schemas
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from gaia.schemas.common import CamelModel, Pagination


# ============================================================================
# ORDER CREATION
# ============================================================================
class OrderLineIn(CamelModel):
    """One cart line as submitted by the storefront. Extra cart fields are ignored."""
    id: int  # product id
    quantity: int = Field(gt=0)
    price: float
    selected_color: Optional[str] = None


class GuestInfo(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None


class OrderCreate(CamelModel):
    items: Optional[List[OrderLineIn]] = None
    subtotal: Optional[float] = None
    discount: Optional[float] = None
    shipping_cost: Optional[float] = None
    total: Optional[float] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def non_list_items_are_missing(cls, v):
        return v if isinstance(v, list) else None


class GuestOrderCreate(OrderCreate):
    user_info: Optional[GuestInfo] = None


class OrderCreated(CamelModel):
    id: int
    order_number: str
    status: str
    subtotal: float
    discount: float
    shipping_cost: float
    total: float
    created_at: str


# ============================================================================
# ORDER READS
# ============================================================================
class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    quantity: int
    price: float
    color: Optional[str] = None


class OrderSummary(CamelModel):
    id: int
    order_number: str
    status: str
    subtotal: float
    discount: float
    shipping_cost: float
    total: float
    created_at: datetime
    items: List[OrderItemResponse] = []


class OrderDetail(OrderSummary):
    user_id: Optional[int] = None
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None
    cancellation_reason: Optional[str] = None
    updated_at: Optional[datetime] = None


class OrderList(BaseModel):
    pagination: Pagination
    orders: List[OrderSummary]


class AdminOrderSummary(CamelModel):
    id: int
    order_number: str
    user_id: Optional[int] = None
    guest_email: Optional[str] = None
    guest_name: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    status: str
    subtotal: float
    discount: float
    shipping_cost: float
    total: float
    created_at: datetime


class AdminOrderList(BaseModel):
    pagination: Pagination
    orders: List[AdminOrderSummary]


# ============================================================================
# ORDER MUTATIONS
# ============================================================================
class CancelRequest(BaseModel):
    reason: Optional[str] = None


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class OrderStatusChanged(CamelModel):
    message: str
    order_id: int
    status: str


# ============================================================================
# TRACKING
# ============================================================================
class TrackedAddress(BaseModel):
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class TrackedOrder(CamelModel):
    order_number: str
    status: str
    created_at: datetime
    total: float
    shipping_address: TrackedAddress


# ============================================================================
# STATS
# ============================================================================
class StatsPeriod(CamelModel):
    start_date: str
    end_date: str


class StatsTotals(BaseModel):
    orders: int
    revenue: float


class StatusCount(BaseModel):
    status: str
    count: int


class TopProduct(CamelModel):
    product_id: int
    name: str
    order_count: int
    total_quantity: int


class DailyStat(CamelModel):
    date: str
    order_count: int
    revenue: float


class OrderStats(CamelModel):
    period: StatsPeriod
    totals: StatsTotals
    orders_by_status: List[StatusCount]
    top_products: List[TopProduct]
    daily_stats: List[DailyStat]


# ============================================================================
# PROMO CODES & SHIPPING
# ============================================================================
class PromoCodeRequest(BaseModel):
    code: Optional[str] = None


class PromoCodeResult(CamelModel):
    valid: bool
    code: str
    discount_type: str
    discount_value: float
    message: str


class ShippingQuoteRequest(CamelModel):
    postal_code: Optional[str] = None
    country: Optional[str] = None
    items: Optional[List[Any]] = None
    subtotal: Optional[float] = None

    @field_validator("items", mode="before")
    @classmethod
    def non_list_items_are_missing(cls, v):
        return v if isinstance(v, list) else None


class ShippingQuote(CamelModel):
    shipping_cost: float
    currency: str
    free_shipping_threshold: float
    estimated_delivery: str
