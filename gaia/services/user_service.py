"""
User Service

Accounts, credentials, saved addresses and saved payment methods.
"""
import logging
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gaia.core.exceptions import (
    AuthenticationError,
    ConflictError,
    GaiaBaseError,
    NotFoundError,
    ValidationError,
)
from gaia.core.security import create_access_token, get_password_hash, verify_password
from gaia.models.address import UserAddress, UserPaymentMethod
from gaia.models.user import User
from gaia.schemas.user import AddressIn, PaymentMethodIn

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserService:
    """
    Service for user management operations.

    Features:
    - Registration and login with JWT issue
    - Password change
    - Profile updates
    - Address book and saved cards with a single default each
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================
    # Accounts
    # ============================================================

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        if await self.get_user_by_email(email):
            raise ConflictError("Email already in use")

        user = User(name=name, email=email, password=get_password_hash(password), role="customer")
        self.db.add(user)
        await self.db.commit()

        logger.info(f"Registered user {user.id}")
        return self._auth_payload(user)

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError("Invalid email or password")

        return self._auth_payload(user)

    @staticmethod
    def _auth_payload(user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "token": create_access_token({"sub": user.id}),
        }

    async def change_password(
        self,
        user: User,
        current_password: Optional[str],
        new_password: Optional[str],
        mismatch_error: Type[GaiaBaseError] = AuthenticationError,
        password_label: str = "New password",
    ) -> None:
        """
        Replace the password after checking the current one.

        `mismatch_error` selects the error raised for a wrong current password
        and `password_label` names the new password in the length error;
        the auth and profile endpoints answer differently.
        """
        if not current_password or not new_password:
            raise ValidationError("Current and new passwords are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"{password_label} must be at least {MIN_PASSWORD_LENGTH} characters")
        if not verify_password(current_password, user.password):
            raise mismatch_error("Current password is incorrect")

        user.password = get_password_hash(new_password)
        await self.db.commit()
        logger.info(f"Password changed for user {user.id}")

    async def update_profile(self, user: User, name: Optional[str], phone: Optional[str]) -> User:
        if not name:
            raise ValidationError("Name is required")
        user.name = name
        user.phone = phone or None
        await self.db.commit()
        return user

    # ============================================================
    # Addresses
    # ============================================================

    async def list_addresses(self, user: User) -> List[UserAddress]:
        result = await self.db.execute(
            select(UserAddress)
            .where(UserAddress.user_id == user.id)
            .order_by(UserAddress.is_default.desc(), UserAddress.id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _check_address(data: AddressIn) -> None:
        if not all([data.name, data.address, data.city, data.state, data.postal_code, data.country]):
            raise ValidationError("All address fields are required")

    async def _clear_default_address(self, user: User) -> None:
        await self.db.execute(
            update(UserAddress).where(UserAddress.user_id == user.id).values(is_default=False)
        )

    async def add_address(self, user: User, data: AddressIn) -> UserAddress:
        self._check_address(data)
        if data.is_default:
            await self._clear_default_address(user)

        address = UserAddress(
            user_id=user.id,
            name=data.name,
            address=data.address,
            city=data.city,
            state=data.state,
            postal_code=data.postal_code,
            country=data.country,
            phone=data.phone or None,
            is_default=data.is_default,
        )
        self.db.add(address)
        await self.db.commit()
        return address

    async def _owned_address(self, user: User, address_id: int) -> UserAddress:
        address = await self.db.scalar(
            select(UserAddress).where(UserAddress.id == address_id, UserAddress.user_id == user.id)
        )
        if not address:
            raise NotFoundError("Address not found or not owned by user")
        return address

    async def update_address(self, user: User, address_id: int, data: AddressIn) -> UserAddress:
        self._check_address(data)
        address = await self._owned_address(user, address_id)
        if data.is_default:
            await self._clear_default_address(user)

        address.name = data.name
        address.address = data.address
        address.city = data.city
        address.state = data.state
        address.postal_code = data.postal_code
        address.country = data.country
        address.phone = data.phone or None
        address.is_default = data.is_default
        await self.db.commit()
        return address

    async def delete_address(self, user: User, address_id: int) -> None:
        """Delete an address; removing the default promotes the oldest remaining one."""
        address = await self._owned_address(user, address_id)
        was_default = address.is_default
        await self.db.delete(address)
        await self.db.flush()

        if was_default:
            replacement = await self.db.scalar(
                select(UserAddress).where(UserAddress.user_id == user.id).order_by(UserAddress.id).limit(1)
            )
            if replacement:
                replacement.is_default = True
        await self.db.commit()

    # ============================================================
    # Payment methods
    # ============================================================

    async def list_payment_methods(self, user: User) -> List[UserPaymentMethod]:
        result = await self.db.execute(
            select(UserPaymentMethod)
            .where(UserPaymentMethod.user_id == user.id)
            .order_by(UserPaymentMethod.is_default.desc(), UserPaymentMethod.id)
        )
        return list(result.scalars().all())

    async def add_payment_method(self, user: User, data: PaymentMethodIn) -> UserPaymentMethod:
        if not all([data.card_type, data.last_four, data.expiry_month, data.expiry_year]):
            raise ValidationError("All payment method fields are required")

        if data.is_default:
            await self.db.execute(
                update(UserPaymentMethod).where(UserPaymentMethod.user_id == user.id).values(is_default=False)
            )

        method = UserPaymentMethod(
            user_id=user.id,
            card_type=data.card_type,
            last_four=data.last_four,
            expiry_month=data.expiry_month,
            expiry_year=data.expiry_year,
            is_default=data.is_default,
        )
        self.db.add(method)
        await self.db.commit()
        return method

    async def delete_payment_method(self, user: User, method_id: int) -> None:
        method = await self.db.scalar(
            select(UserPaymentMethod).where(
                UserPaymentMethod.id == method_id, UserPaymentMethod.user_id == user.id
            )
        )
        if not method:
            raise NotFoundError("Payment method not found or not owned by user")

        was_default = method.is_default
        await self.db.delete(method)
        await self.db.flush()

        if was_default:
            replacement = await self.db.scalar(
                select(UserPaymentMethod)
                .where(UserPaymentMethod.user_id == user.id)
                .order_by(UserPaymentMethod.id)
                .limit(1)
            )
            if replacement:
                replacement.is_default = True
        await self.db.commit()
