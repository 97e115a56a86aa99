"""
Promo code model
"""
from sqlalchemy import Column, Integer, String, Float, DateTime

from gaia.core.database import Base, utcnow


class PromoCode(Base):
    __tablename__ = "promo_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)  # stored upper-case
    discount_type = Column(String, nullable=False)  # percentage, fixed
    discount_value = Column(Float, nullable=False)
    min_purchase = Column(Float, default=0.0)
    max_discount = Column(Float)
    uses = Column(Integer, default=0)
    max_uses = Column(Integer)  # None = unlimited
    expires_at = Column(DateTime)  # None = never

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
