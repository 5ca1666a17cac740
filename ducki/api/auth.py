from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from ducki.database import get_db
from ducki.api.deps import get_current_user
from ducki.core.redis import redis_client
from ducki.core.security import (
    create_access_token,
    create_refresh_token,
    REFRESH,
    token_ttl_seconds,
    verify_token,
)
from ducki.models.user import User
from ducki.services.auth_service import auth_service
from ducki.schemas.auth import (
    Token,
    SignUpRequest,
    SignInRequest,
    RefreshTokenRequest,
    PasswordUpdate,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


def _issue_tokens(user: User) -> AuthResponse:
    token_data = {"user_id": user.id}
    return AuthResponse(
        access_token=create_access_token(token_data),
        refresh_token=create_refresh_token(token_data),
        user=UserResponse.model_validate(user),
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def sign_up(
    request: SignUpRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register with email and password; also creates the user's profile"""
    user = await auth_service.sign_up(db, request.email, request.password)
    return _issue_tokens(user)


@router.post("/login", response_model=AuthResponse)
async def sign_in(
    request: SignInRequest,
    db: AsyncSession = Depends(get_db)
):
    user = await auth_service.sign_in_with_password(db, request.email, request.password)
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
async def refresh_access_token(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Refresh access token using refresh token (checks blacklist)"""
    payload = verify_token(request.refresh_token, REFRESH)
    if not payload or await redis_client.is_token_blacklisted(request.refresh_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or blacklisted refresh token"
        )

    user = await auth_service.get_by_id(db, payload.get("user_id"))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return Token(
        access_token=create_access_token({"user_id": user.id}),
        refresh_token=request.refresh_token,
    )


@router.post("/logout", response_model=MessageResponse)
async def sign_out(
    request: RefreshTokenRequest,
    current_user: User = Depends(get_current_user)
):
    """Revoke the refresh token; access tokens simply expire"""
    payload = verify_token(request.refresh_token, REFRESH)
    if payload and payload.get("user_id") == current_user.id:
        await redis_client.blacklist_token(request.refresh_token, token_ttl_seconds(payload))
    logger.info(f"User {current_user.id} signed out")
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user)
):
    """Get current user information"""
    return UserResponse.model_validate(current_user)


@router.put("/password", response_model=MessageResponse)
async def update_password(
    request: PasswordUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await auth_service.update_password(db, current_user, request.password, request.password_confirm)
    return MessageResponse(message="Password updated")
