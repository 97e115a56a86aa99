"""
Order models

The display order number (ORD-000042) is derived from the id and never stored.
Totals are persisted as submitted by the client.
"""
import enum

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text, JSON
from sqlalchemy.orm import relationship

from gaia.core.database import Base, utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"
    REFUNDED = "refunded"


# Owners may cancel only before the order ships
CANCELLABLE_STATUSES = (OrderStatus.PENDING.value, OrderStatus.PROCESSING.value)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Guest checkout
    guest_email = Column(String, index=True)
    guest_name = Column(String)

    status = Column(String, nullable=False, default=OrderStatus.PENDING.value)

    # Pricing
    subtotal = Column(Float, nullable=False)
    discount = Column(Float, default=0.0)
    shipping_cost = Column(Float, default=0.0)
    total = Column(Float, nullable=False)

    # Addresses
    shipping_address = Column(JSON, nullable=False)
    billing_address = Column(JSON)

    # Payment
    payment_method = Column(String)  # card, cod

    cancellation_reason = Column(Text)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan",
        passive_deletes=True, order_by="OrderItem.id",
    )

    @property
    def order_number(self) -> str:
        return f"ORD-{self.id:06d}"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)  # unit price at order time
    color = Column(String)

    created_at = Column(DateTime, default=utcnow)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")
