"""
Content Service

Storefront copy and image references edited from the admin console.
"""
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.core.exceptions import ConflictError, NotFoundError, ValidationError
from gaia.models.content import Content


def _entry(row: Content) -> Dict[str, object]:
    return {"value": row.value, "type": row.type, "id": row.id}


class ContentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_grouped(self) -> Dict[str, Dict[str, dict]]:
        """{section: {key: {value, type, id}}}"""
        result = await self.db.execute(select(Content).order_by(Content.section, Content.key))
        grouped: Dict[str, Dict[str, dict]] = {}
        for row in result.scalars():
            grouped.setdefault(row.section, {})[row.key] = _entry(row)
        return grouped

    async def get_section(self, section: str) -> Dict[str, dict]:
        result = await self.db.execute(
            select(Content).where(Content.section == section).order_by(Content.key)
        )
        return {row.key: _entry(row) for row in result.scalars()}

    async def add(self, section: Optional[str], key: Optional[str], value: Optional[str], type_: str = "text") -> Content:
        if not section or not key or value is None:
            raise ValidationError("Section, key, and value are required")

        existing = await self.db.scalar(
            select(Content.id).where(Content.section == section, Content.key == key)
        )
        if existing is not None:
            raise ConflictError("Content with this section and key already exists")

        row = Content(section=section, key=key, value=value, type=type_ or "text")
        self.db.add(row)
        await self.db.commit()
        return row

    async def update_value(self, content_id: int, value: Optional[str]) -> Content:
        if value is None:
            raise ValidationError("Content value is required")
        row = await self.db.get(Content, content_id)
        if not row:
            raise NotFoundError("Content not found")
        row.value = value
        await self.db.commit()
        return row

    async def delete(self, content_id: int) -> None:
        row = await self.db.get(Content, content_id)
        if not row:
            raise NotFoundError("Content not found")
        await self.db.delete(row)
        await self.db.commit()
