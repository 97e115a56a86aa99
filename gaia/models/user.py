"""
User model
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from gaia.core.database import Base, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    phone = Column(String)
    role = Column(String, nullable=False, default="customer")  # customer, admin

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    orders = relationship("Order", back_populates="user", passive_deletes=True)
    addresses = relationship("UserAddress", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    payment_methods = relationship(
        "UserPaymentMethod", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
