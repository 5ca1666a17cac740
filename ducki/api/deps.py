from fastapi import Depends, HTTPException, UploadFile, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from ducki.config import settings
from ducki.database import get_db
from ducki.core.security import ACCESS, verify_token
from ducki.core.media_upload import MediaFile, MediaUploader
from ducki.models.user import User
from ducki.services.auth_service import auth_service
from ducki.services.record_store import RecordStore
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user
    A missing or invalid token is a 401, which clients treat as "go to login"
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    payload = verify_token(credentials.credentials, ACCESS)
    if not payload or not payload.get("user_id"):
        logger.debug("Access token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    user = await auth_service.get_by_id(db, payload["user_id"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def get_record_store(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
) -> RecordStore:
    """Row store scoped to the authenticated user"""
    return RecordStore(db, current_user.id)


def get_item_uploader() -> MediaUploader:
    """Media host client for item photos and outfit media"""
    return MediaUploader(settings.item_media)


def get_avatar_uploader() -> MediaUploader:
    """Media host client for profile avatars"""
    return MediaUploader(settings.avatar_media)


async def read_upload(file: Optional[UploadFile]) -> Optional[MediaFile]:
    """
    Read an optional multipart file into memory

    Returns None when no file (or an empty file field) was sent.
    """
    if file is None or not file.filename:
        return None

    content = await file.read()
    if not content:
        return None
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File {file.filename} too large. Max size: {settings.MAX_UPLOAD_SIZE / 1024 / 1024}MB"
        )
    return MediaFile(
        content=content,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )


def validation_detail(error: ValidationError) -> str:
    """One line per field problem, for forms validated inside a handler"""
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in error.errors())
