"""
User / Directory Routes

GET /users - List users (filter by role, college)
PATCH /users/me - Update own profile
GET /users/{user_id} - Public profile
GET /alumni - Search alumni by company or field
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from alumni_connect.core.auth import get_current_user
from alumni_connect.db.mongodb import get_db
from alumni_connect.schemas.schemas import ProfileUpdate, UserResponse, UserRole
from alumni_connect.services.mongo_service import UserService

router = APIRouter(tags=["Users"])


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = Query(None),
    college: Optional[str] = Query(None),
    db: Database = Depends(get_db)
):
    """List users, optionally by exact role and college."""
    return UserService(db).list(role=role.value if role else None, college=college)


@router.patch("/users/me", response_model=UserResponse)
async def update_me(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db)
):
    """Update own profile. Only provided fields are changed."""
    return UserService(db).update_profile(user["id"], data.to_document(exclude_unset=True, exclude_none=True))


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: Database = Depends(get_db)):
    return UserService(db).require(user_id)


@router.get("/alumni", response_model=List[UserResponse])
async def search_alumni(
    company: Optional[str] = Query(None, description="Substring of company"),
    field: Optional[str] = Query(None, description="Substring of department or position"),
    db: Database = Depends(get_db)
):
    """Search alumni by company or field (case-insensitive)."""
    return UserService(db).search_alumni(company=company, field=field)
