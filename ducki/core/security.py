"""
Login tokens and password hashing.

Access and refresh tokens are HS256 JWTs carrying user_id and a "type"
claim; a token is only accepted where its type is expected.
"""
from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from ducki.config import settings
from ducki.core.datetime_utils import utc_now

ACCESS = "access"
REFRESH = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _encode(data: dict, token_type: str, lifetime: timedelta) -> str:
    claims = {**data, "exp": utc_now() + lifetime, "type": token_type}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, ACCESS, lifetime)


def create_refresh_token(data: dict) -> str:
    return _encode(data, REFRESH, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def verify_token(token: str, token_type: str = ACCESS) -> Optional[dict]:
    """
    Decode a token of the expected type.

    Returns:
        Token payload dict, or None when the signature, expiry or type is wrong
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload


def token_ttl_seconds(payload: dict) -> int:
    """Seconds left until the token in payload expires (never negative)"""
    exp = payload.get("exp")
    if not exp:
        return 0
    return max(0, int(exp - utc_now().timestamp()))


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
