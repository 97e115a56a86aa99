"""
Shared schema base and pagination envelope
"""
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case names also accepted on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    per_page: int

    @classmethod
    def build(cls, page: int, per_page: int, total_items: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=math.ceil(total_items / per_page) if per_page else 0,
            total_items=total_items,
            per_page=per_page,
        )


class MessageResponse(BaseModel):
    message: str


class ResourceMessage(CamelModel):
    message: str
    id: Optional[int] = None
