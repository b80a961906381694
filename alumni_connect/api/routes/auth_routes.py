"""
Authentication Routes

POST /auth/register - Register new user (starts a session)
POST /auth/login - Login (starts a session)
POST /auth/logout - End the session
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, Depends, Response
from pymongo.database import Database

from alumni_connect.api.deps import get_app_settings
from alumni_connect.core.auth import (
    clear_session_cookie,
    get_current_user,
    hash_password,
    set_session_cookie,
    verify_password,
)
from alumni_connect.core.config import Settings
from alumni_connect.core.exceptions import AuthenticationError
from alumni_connect.db.mongodb import get_db
from alumni_connect.schemas.schemas import LoginRequest, MessageResponse, RegisterRequest, UserResponse
from alumni_connect.services.mongo_service import UserService, public_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """Register a new account. The caller is logged in straight away."""
    user = UserService(db).create(
        request.to_document(exclude={"password"}),
        password_hash=hash_password(request.password)
    )
    set_session_cookie(response, user["id"], settings)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """Login with username and password; sets the session cookie."""
    doc = UserService(db).get_credentials(request.username)
    if not doc or not verify_password(request.password, doc["passwordHash"]):
        raise AuthenticationError("Invalid credentials")

    user = public_user(doc)
    set_session_cookie(response, user["id"], settings)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    clear_session_cookie(response, settings)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's profile."""
    return user
