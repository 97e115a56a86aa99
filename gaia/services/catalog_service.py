"""
Catalog Service

Products, their colors and images, and the categories they are filed under.
Products reference a category by name; the cached `product_count` on every
category is recomputed after each product write.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gaia.core.exceptions import ConflictError, NotFoundError, ValidationError
from gaia.models.category import Category
from gaia.models.product import Product, ProductColor
from gaia.schemas.catalog import CategoryIn, ColorIn, ProductIn
from gaia.schemas.common import Pagination

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_PAGE_SIZE = 10
DEFAULT_CATEGORY_PAGE_SIZE = 12

# sort key -> ORDER BY clause
CATEGORY_SORTS = {
    "price-asc": (Product.price.asc(), Product.id),
    "price-desc": (Product.price.desc(), Product.id),
    "discount": ((Product.original_price - Product.price).desc(), Product.id),
    "newest": (Product.created_at.desc(), Product.id.desc()),
}


def _with_media(query):
    return query.options(selectinload(Product.images), selectinload(Product.colors))


class CatalogService:
    """Product and category reads and admin writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # Products
    # ============================================================

    async def list_products(
        self,
        page: int = 1,
        limit: int = DEFAULT_PRODUCT_PAGE_SIZE,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        conditions = []
        if category:
            conditions.append(Product.category == category)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(Product.name.like(pattern), Product.description.like(pattern)))

        total_items = await self.db.scalar(select(func.count(Product.id)).where(*conditions))
        result = await self.db.execute(
            _with_media(select(Product).where(*conditions))
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return {
            "pagination": Pagination.build(page, limit, total_items or 0),
            "products": list(result.scalars().all()),
        }

    async def get_product(self, product_id: int) -> Product:
        result = await self.db.execute(_with_media(select(Product).where(Product.id == product_id)))
        product = result.scalar_one_or_none()
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _check_product(data: ProductIn) -> None:
        if not data.name or not data.category or not data.price:
            raise ValidationError("Name, category, and price are required")

    @staticmethod
    def _apply_product_fields(product: Product, data: ProductIn) -> None:
        product.name = data.name
        product.category = data.category
        product.price = data.price
        product.original_price = data.original_price or None
        product.discount_percentage = data.discount_percentage or None
        product.description = data.description or None
        product.ingredients = data.ingredients or None
        product.how_to_use = data.how_to_use or None
        product.inventory_status = data.inventory_status or "in-stock"
        product.inventory_message = data.inventory_message or None

    @staticmethod
    def _colors(colors: List[ColorIn]) -> List[ProductColor]:
        return [ProductColor(name=c.name, value=c.value) for c in colors]

    async def create_product(self, data: ProductIn) -> Product:
        self._check_product(data)
        product = Product(images=[], colors=self._colors(data.colors or []))
        self._apply_product_fields(product, data)
        self.db.add(product)
        await self.db.flush()
        await self.refresh_category_counts()
        await self.db.commit()

        logger.info(f"Created product {product.id} in {product.category}")
        return product

    async def update_product(self, product_id: int, data: ProductIn) -> Product:
        """Overwrite product fields; the color list is replaced only when one is sent."""
        self._check_product(data)
        product = await self.get_product(product_id)
        self._apply_product_fields(product, data)

        if data.colors is not None:
            product.colors = self._colors(data.colors)
        await self.db.flush()

        await self.refresh_category_counts()
        await self.db.commit()
        return product

    async def delete_product(self, product_id: int) -> None:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product not found")
        await self.db.delete(product)
        await self.db.flush()
        await self.refresh_category_counts()
        await self.db.commit()
        logger.info(f"Deleted product {product_id}")

    async def refresh_category_counts(self) -> None:
        """Recompute Category.product_count from the products table."""
        counts = (
            select(func.count(Product.id))
            .where(Product.category == Category.name)
            .scalar_subquery()
        )
        await self.db.execute(
            update(Category).values(product_count=counts).execution_options(synchronize_session=False)
        )

    # ============================================================
    # Categories
    # ============================================================

    async def list_categories(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Category:
        category = await self.db.get(Category, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    async def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        return await self.db.scalar(query) is not None

    async def create_category(self, data: CategoryIn) -> Category:
        if not data.name:
            raise ValidationError("Category name is required")
        if await self._name_taken(data.name):
            raise ConflictError("Category with this name already exists")

        category = Category(name=data.name, image_path=data.image_path, product_count=0)
        self.db.add(category)
        await self.db.commit()
        return category

    async def update_category(self, category_id: int, data: CategoryIn) -> Category:
        """Rename a category. Products keep the old name until they are re-filed."""
        if not data.name:
            raise ValidationError("Category name is required")
        if await self._name_taken(data.name, exclude_id=category_id):
            raise ConflictError("Category with this name already exists")

        category = await self.get_category(category_id)
        category.name = data.name
        if data.image_path is not None:
            category.image_path = data.image_path
        await self.db.commit()
        return category

    async def delete_category(self, category_id: int) -> None:
        category = await self.get_category(category_id)
        product_count = await self.db.scalar(
            select(func.count(Product.id)).where(Product.category == category.name)
        )
        if product_count:
            raise ConflictError(
                "Cannot delete category with associated products",
                details={"product_count": product_count},
            )
        await self.db.delete(category)
        await self.db.commit()

    async def list_category_products(
        self,
        category_id: int,
        page: int = 1,
        limit: int = DEFAULT_CATEGORY_PAGE_SIZE,
        sort: str = "newest",
    ) -> Dict[str, Any]:
        category = await self.get_category(category_id)
        order_by = CATEGORY_SORTS.get(sort, CATEGORY_SORTS["newest"])

        total_items = await self.db.scalar(
            select(func.count(Product.id)).where(Product.category == category.name)
        )
        result = await self.db.execute(
            _with_media(select(Product).where(Product.category == category.name))
            .order_by(*order_by)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return {
            "category": category.name,
            "pagination": Pagination.build(page, limit, total_items or 0),
            "products": list(result.scalars().all()),
        }
