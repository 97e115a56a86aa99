"""
User, auth and saved-address schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from gaia.schemas.common import CamelModel


# ============================================================================
# AUTH
# ============================================================================
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str
    token: str


class PasswordChange(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


# ============================================================================
# USERS
# ============================================================================
class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str


class ProfileResponse(UserResponse):
    phone: Optional[str] = None


class AdminUserResponse(UserResponse):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


# ============================================================================
# ADDRESSES
# ============================================================================
class AddressIn(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    is_default: bool = False


class AddressResponse(CamelModel):
    id: int
    user_id: int
    name: str
    address: str
    city: str
    state: str
    postal_code: str
    country: str
    phone: Optional[str] = None
    is_default: bool


# ============================================================================
# PAYMENT METHODS
# ============================================================================
class PaymentMethodIn(CamelModel):
    card_type: Optional[str] = None
    last_four: Optional[str] = None
    expiry_month: Optional[str] = None
    expiry_year: Optional[str] = None
    is_default: bool = False


class PaymentMethodResponse(CamelModel):
    id: int
    user_id: int
    card_type: str
    last_four: str
    expiry_month: str
    expiry_year: str
    is_default: bool
