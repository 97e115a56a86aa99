"""
Category routes
"""
from typing import List

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_client_ip, get_current_admin
from gaia.core.audit_log import (
    ACTION_CATEGORY_CREATE,
    ACTION_CATEGORY_DELETE,
    ACTION_CATEGORY_UPDATE,
    log_admin_action,
)
from gaia.core.database import get_db
from gaia.models.user import User
from gaia.schemas.catalog import CategoryIn, CategoryProductList, CategoryResponse
from gaia.schemas.common import MessageResponse
from gaia.services.catalog_service import DEFAULT_CATEGORY_PAGE_SIZE, CatalogService

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await CatalogService(db).list_categories()


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await CatalogService(db).get_category(category_id)


@router.get("/{category_id}/products", response_model=CategoryProductList)
async def list_category_products(
    category_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_CATEGORY_PAGE_SIZE, ge=1, le=100),
    sort: str = Query("newest"),
    db: AsyncSession = Depends(get_db)
):
    """Sort: newest, price-asc, price-desc, discount. Unknown values fall back to newest."""
    return await CatalogService(db).list_category_products(category_id, page, limit, sort)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryIn,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    category = await CatalogService(db).create_category(data)
    log_admin_action(
        action=ACTION_CATEGORY_CREATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="category",
        resource_id=category.id,
        details={"name": category.name},
        ip_address=get_client_ip(request),
    )
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    data: CategoryIn,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    category = await CatalogService(db).update_category(category_id, data)
    log_admin_action(
        action=ACTION_CATEGORY_UPDATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="category",
        resource_id=category_id,
        details={"name": category.name},
        ip_address=get_client_ip(request),
    )
    return category


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await CatalogService(db).delete_category(category_id)
    log_admin_action(
        action=ACTION_CATEGORY_DELETE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="category",
        resource_id=category_id,
        ip_address=get_client_ip(request),
    )
    return {"message": "Category deleted successfully"}
