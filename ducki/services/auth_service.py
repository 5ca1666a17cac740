"""
Auth service - email/password accounts and their profile rows
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from ducki.config import settings
from ducki.models.user import User, Profile
from ducki.core.exceptions import AuthError, RecordStoreError
from ducki.core.security import get_password_hash, verify_password
import logging

logger = logging.getLogger(__name__)


class AuthService:

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    def validate_password(password: str, password_confirm: Optional[str] = None) -> None:
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters.")
        if password_confirm is not None and password != password_confirm:
            raise AuthError("Passwords do not match.")

    @staticmethod
    async def sign_up(db: AsyncSession, email: str, password: str) -> User:
        """
        Create an account and its profile row

        The profile starts private with username = the email's local part.

        Raises:
            AuthError: weak password or email already registered
            RecordStoreError: profile row could not be created
        """
        AuthService.validate_password(password)
        email = email.lower()
        if await AuthService.get_by_email(db, email):
            raise AuthError("User already registered")

        user = User(email=email, hashed_password=get_password_hash(password))
        db.add(user)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            raise RecordStoreError(str(getattr(e, "orig", e))) from e

        try:
            db.add(Profile(
                id=user.id,
                username=email.split("@")[0],
                is_public=False,
                avatar_url=None,
            ))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Profile creation failed for {email}: {e}")
            raise RecordStoreError(f"Profile creation failed: {getattr(e, 'orig', e)}") from e

        await db.refresh(user)
        logger.info(f"User signed up: {user.email} (id={user.id})")
        return user

    @staticmethod
    async def sign_in_with_password(db: AsyncSession, email: str, password: str) -> User:
        user = await AuthService.get_by_email(db, email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed sign-in for {email}")
            raise AuthError("Invalid login credentials")
        logger.info(f"User signed in: {user.email} (id={user.id})")
        return user

    @staticmethod
    async def update_password(db: AsyncSession, user: User, password: str, password_confirm: str) -> None:
        AuthService.validate_password(password, password_confirm)
        user.hashed_password = get_password_hash(password)
        await db.commit()
        logger.info(f"Password updated for user {user.id}")


auth_service = AuthService()
