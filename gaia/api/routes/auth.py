"""
Authentication routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.api.deps import get_current_user
from gaia.core.database import get_db
from gaia.models.user import User
from gaia.schemas.common import MessageResponse
from gaia.schemas.user import AuthResponse, LoginRequest, PasswordChange, RegisterRequest, UserResponse
from gaia.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a customer account and sign it in"""
    return await UserService(db).register(data.name, data.email, data.password)


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await UserService(db).authenticate(data.email, data.password)


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current user info"""
    return user


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).change_password(user, data.current_password, data.new_password)
    return {"message": "Password changed successfully"}
