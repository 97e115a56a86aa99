"""
Editable storefront copy and imagery, keyed by (section, key)
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, UniqueConstraint

from gaia.core.database import Base, utcnow


class Content(Base):
    __tablename__ = "content"
    __table_args__ = (
        UniqueConstraint("section", "key", name="uq_content_section_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    section = Column(String, nullable=False, index=True)
    key = Column(String, nullable=False)
    value = Column(Text, nullable=False)
    type = Column(String, nullable=False, default="text")  # text, image

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
