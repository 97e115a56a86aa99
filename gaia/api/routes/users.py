"""
User profile, address book and saved card routes
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_current_admin, get_current_user
from gaia.core.database import get_db
from gaia.core.exceptions import NotFoundError, ValidationError
from gaia.models.user import User
from gaia.schemas.common import MessageResponse
from gaia.schemas.user import (
    AddressIn,
    AddressResponse,
    AdminUserResponse,
    PasswordChange,
    PaymentMethodIn,
    PaymentMethodResponse,
    ProfileResponse,
    ProfileUpdate,
)
from gaia.services.user_service import UserService

router = APIRouter()


# ============================================================================
# PROFILE
# ============================================================================

@router.get("/profile", response_model=AdminUserResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).update_profile(user, data.name, data.phone)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).change_password(
        user,
        data.current_password,
        data.new_password,
        mismatch_error=ValidationError,
        password_label="Password",
    )
    return {"message": "Password changed successfully"}


# ============================================================================
# ADDRESSES
# ============================================================================

@router.get("/addresses", response_model=List[AddressResponse])
async def list_addresses(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Default address first"""
    return await UserService(db).list_addresses(user)


@router.post("/addresses", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def add_address(
    data: AddressIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).add_address(user, data)


@router.put("/addresses/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: int,
    data: AddressIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).update_address(user, address_id, data)


@router.delete("/addresses/{address_id}", response_model=MessageResponse)
async def delete_address(
    address_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).delete_address(user, address_id)
    return {"message": "Address deleted successfully"}


# ============================================================================
# PAYMENT METHODS
# ============================================================================

@router.get("/payment-methods", response_model=List[PaymentMethodResponse])
async def list_payment_methods(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_payment_methods(user)


@router.post("/payment-methods", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def add_payment_method(
    data: PaymentMethodIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).add_payment_method(user, data)


@router.delete("/payment-methods/{method_id}", response_model=MessageResponse)
async def delete_payment_method(
    method_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).delete_payment_method(user, method_id)
    return {"message": "Payment method deleted successfully"}


# ============================================================================
# ADMIN
# ============================================================================

@router.get("", response_model=List[AdminUserResponse])
async def list_users(admin: User = Depends(get_current_admin), db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_users()


@router.get("/{user_id}", response_model=AdminUserResponse)
async def get_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    user = await UserService(db).get_user_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user
