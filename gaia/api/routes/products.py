"""
Product routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_client_ip, get_current_admin
from gaia.core.audit_log import (
    ACTION_PRODUCT_CREATE,
    ACTION_PRODUCT_DELETE,
    ACTION_PRODUCT_UPDATE,
    log_admin_action,
)
from gaia.core.database import get_db
from gaia.models.user import User
from gaia.schemas.catalog import ProductDetail, ProductIn, ProductList
from gaia.schemas.common import MessageResponse, ResourceMessage
from gaia.services.catalog_service import DEFAULT_PRODUCT_PAGE_SIZE, CatalogService

router = APIRouter()


@router.get("", response_model=ProductList)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PRODUCT_PAGE_SIZE, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List products with optional category filter and name/description search"""
    return await CatalogService(db).list_products(page, limit, category, search)


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get single product with images and colors"""
    return await CatalogService(db).get_product(product_id)


@router.post("", response_model=ResourceMessage, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductIn,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    product = await CatalogService(db).create_product(data)
    log_admin_action(
        action=ACTION_PRODUCT_CREATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="product",
        resource_id=product.id,
        details={"name": product.name, "category": product.category},
        ip_address=get_client_ip(request),
    )
    return {"id": product.id, "message": "Product created successfully"}


@router.put("/{product_id}", response_model=ResourceMessage)
async def update_product(
    product_id: int,
    data: ProductIn,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await CatalogService(db).update_product(product_id, data)
    log_admin_action(
        action=ACTION_PRODUCT_UPDATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="product",
        resource_id=product_id,
        details=data.model_dump(exclude_unset=True, exclude={"colors"}),
        ip_address=get_client_ip(request),
    )
    return {"id": product_id, "message": "Product updated successfully"}


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await CatalogService(db).delete_product(product_id)
    log_admin_action(
        action=ACTION_PRODUCT_DELETE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="product",
        resource_id=product_id,
        ip_address=get_client_ip(request),
    )
    return {"message": "Product deleted successfully"}
