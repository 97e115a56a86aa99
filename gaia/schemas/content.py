"""
Content schemas
"""
from typing import Dict, Optional

from pydantic import BaseModel


class ContentEntry(BaseModel):
    value: str
    type: str
    id: int


# key -> entry
SectionContent = Dict[str, ContentEntry]
# section -> key -> entry
GroupedContent = Dict[str, SectionContent]


class ContentIn(BaseModel):
    section: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    type: str = "text"


class ContentResponse(BaseModel):
    id: int
    section: str
    key: str
    value: str
    type: str

    model_config = {"from_attributes": True}


class ContentUpdate(BaseModel):
    value: Optional[str] = None
