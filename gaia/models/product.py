"""
Product models
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from gaia.core.database import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)  # Category.name

    # Pricing
    price = Column(Float, nullable=False)
    original_price = Column(Float)  # Pre-discount price
    discount_percentage = Column(Integer, default=0)

    # Copy
    description = Column(Text)
    ingredients = Column(Text)
    how_to_use = Column(Text)

    # Inventory
    inventory_status = Column(String, default="in-stock")  # in-stock, low-stock, out-of-stock
    inventory_message = Column(String)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    images = relationship(
        "ProductImage", back_populates="product", cascade="all, delete-orphan",
        passive_deletes=True, order_by="ProductImage.id",
    )
    colors = relationship(
        "ProductColor", back_populates="product", cascade="all, delete-orphan",
        passive_deletes=True, order_by="ProductColor.id",
    )
    order_items = relationship("OrderItem", back_populates="product", passive_deletes=True)

    @property
    def primary_image(self):
        for image in self.images:
            if image.is_primary:
                return image.image_path
        return self.images[0].image_path if self.images else None


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_path = Column(String, nullable=False)
    is_primary = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)

    product = relationship("Product", back_populates="images")


class ProductColor(Base):
    __tablename__ = "product_colors"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    value = Column(String, nullable=False)  # hex, e.g. #D4A5A5
    created_at = Column(DateTime, default=utcnow)

    product = relationship("Product", back_populates="colors")
