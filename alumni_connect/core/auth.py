"""
Authentication Utility - session and password handling.

Provides:
- Password hashing with bcrypt
- Session tokens (signed JWT) carried in an HTTP-only cookie
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pymongo.database import Database

from alumni_connect.core.config import Settings
from alumni_connect.core.exceptions import AuthenticationError, AuthorizationError
from alumni_connect.db.mongodb import get_db
from alumni_connect.services.mongo_service import UserService

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Optional bearer token, for API clients that cannot keep cookies
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(
    user_id: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create the signed session token identifying a user."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.session_expire_minutes))
    return jwt.encode(
        {"sub": user_id, "exp": expire},
        settings.session_secret_key,
        algorithm=settings.session_algorithm
    )


def decode_token(token: str, settings: Settings) -> Optional[dict]:
    """Decode and verify a session token."""
    try:
        return jwt.decode(token, settings.session_secret_key, algorithms=[settings.session_algorithm])
    except JWTError:
        return None


def set_session_cookie(response: Response, user_id: str, settings: Settings) -> None:
    """Start a session: issue the cookie on login/registration."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user_id, settings),
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    settings: Settings = request.app.state.settings
    token = request.cookies.get(settings.session_cookie_name)
    if not token and credentials:
        token = credentials.credentials
    if not token:
        raise AuthenticationError()

    payload = decode_token(token, settings)
    if not payload or not payload.get("sub"):
        raise AuthenticationError("Session expired or invalid")

    # Verify user still exists
    user = UserService(db).get_by_id(payload["sub"])
    if not user:
        raise AuthenticationError("Session expired or invalid")
    return user


def require_roles(*roles: str):
    """Dependency factory - Require one of the given roles."""

    async def dependency(user: dict = Depends(get_current_user)) -> dict:
        if user["role"] not in roles:
            raise AuthorizationError()
        return user

    return dependency
