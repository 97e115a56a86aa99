"""
Storefront content routes
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_client_ip, get_current_admin
from gaia.core.audit_log import (
    ACTION_CONTENT_CREATE,
    ACTION_CONTENT_DELETE,
    ACTION_CONTENT_UPDATE,
    log_admin_action,
)
from gaia.core.database import get_db
from gaia.models.user import User
from gaia.schemas.common import MessageResponse, ResourceMessage
from gaia.schemas.content import ContentIn, ContentResponse, ContentUpdate, GroupedContent, SectionContent
from gaia.services.content_service import ContentService

router = APIRouter()


@router.get("", response_model=GroupedContent)
async def get_all_content(db: AsyncSession = Depends(get_db)):
    """All content grouped by section, then key"""
    return await ContentService(db).get_grouped()


@router.get("/section/{section}", response_model=SectionContent)
async def get_section(section: str, db: AsyncSession = Depends(get_db)):
    return await ContentService(db).get_section(section)


@router.post("", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
async def add_content(
    data: ContentIn,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    row = await ContentService(db).add(data.section, data.key, data.value, data.type)
    log_admin_action(
        action=ACTION_CONTENT_CREATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="content",
        resource_id=row.id,
        details={"section": row.section, "key": row.key},
        ip_address=get_client_ip(request),
    )
    return row


@router.put("/{content_id}", response_model=ResourceMessage)
async def update_content(
    content_id: int,
    data: ContentUpdate,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await ContentService(db).update_value(content_id, data.value)
    log_admin_action(
        action=ACTION_CONTENT_UPDATE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="content",
        resource_id=content_id,
        ip_address=get_client_ip(request),
    )
    return {"message": "Content updated successfully", "id": content_id}


@router.delete("/{content_id}", response_model=MessageResponse)
async def delete_content(
    content_id: int,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    await ContentService(db).delete(content_id)
    log_admin_action(
        action=ACTION_CONTENT_DELETE,
        user_id=admin.id,
        user_email=admin.email,
        resource_type="content",
        resource_id=content_id,
        ip_address=get_client_ip(request),
    )
    return {"message": "Content deleted successfully"}
