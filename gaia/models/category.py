"""
Category model

Products reference categories by name, not by foreign key.
"""
from sqlalchemy import Column, Integer, String, DateTime

from gaia.core.database import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    image_path = Column(String)
    product_count = Column(Integer, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
