"""
Product and category schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from gaia.schemas.common import CamelModel, Pagination


# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================
class CategoryIn(CamelModel):
    name: Optional[str] = None
    image_path: Optional[str] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    image_path: Optional[str] = None
    product_count: int = 0


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================
class ColorIn(BaseModel):
    name: str
    value: str


class ColorResponse(CamelModel):
    id: int
    name: str
    value: str


class ImageResponse(CamelModel):
    id: int
    image_path: str
    is_primary: bool


class ProductIn(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    original_price: Optional[float] = None
    discount_percentage: Optional[int] = None
    description: Optional[str] = None
    ingredients: Optional[str] = None
    how_to_use: Optional[str] = None
    inventory_status: Optional[str] = None
    inventory_message: Optional[str] = None
    # None leaves colors untouched on update
    colors: Optional[List[ColorIn]] = None


class ProductSummary(CamelModel):
    id: int
    name: str
    category: str
    price: float
    original_price: Optional[float] = None
    discount_percentage: Optional[int] = None
    inventory_status: Optional[str] = None
    primary_image: Optional[str] = None
    colors: List[ColorResponse] = []
    created_at: Optional[datetime] = None


class ProductDetail(ProductSummary):
    description: Optional[str] = None
    ingredients: Optional[str] = None
    how_to_use: Optional[str] = None
    inventory_message: Optional[str] = None
    images: List[ImageResponse] = []
    updated_at: Optional[datetime] = None


class ProductList(BaseModel):
    pagination: Pagination
    products: List[ProductSummary]


class CategoryProductList(BaseModel):
    category: str
    pagination: Pagination
    products: List[ProductSummary]
