"""
Placement Routes

GET /placements - Placement records, latest year first
GET /placements/stats - Aggregated statistics (public)
POST /placements - Record a placement for a student (staff)
POST /placements/self - Record the caller's own placement
"""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from alumni_connect.core.auth import get_current_user, require_roles
from alumni_connect.core.exceptions import ValidationError
from alumni_connect.db.mongodb import get_db
from alumni_connect.schemas.schemas import PlacementCreate, PlacementResponse, PlacementStatsResponse
from alumni_connect.services.placement_service import PlacementService

router = APIRouter(prefix="/placements", tags=["Placements"])


@router.get("", response_model=List[PlacementResponse])
async def get_placements(db: Database = Depends(get_db)):
    return PlacementService(db).list()


@router.get("/stats", response_model=PlacementStatsResponse)
async def get_placement_stats(db: Database = Depends(get_db)):
    """
    Computed on every call from the current placements and student count.

    Returns totalPlacements, placementRate (% of students placed),
    averagePackage, highestPackage and per-company counts.
    """
    return PlacementService(db).stats()


@router.post("", response_model=PlacementResponse)
async def create_placement(
    data: PlacementCreate,
    user: dict = Depends(require_roles("staff")),
    db: Database = Depends(get_db)
):
    """Record a placement for any student. Staff only."""
    if not data.student_id:
        raise ValidationError("studentId is required")
    return PlacementService(db).create(data.to_document())


@router.post("/self", response_model=PlacementResponse)
async def create_own_placement(
    data: PlacementCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db)
):
    """Record the caller's placement; any studentId in the body is ignored."""
    doc = data.to_document()
    doc["studentId"] = user["id"]
    return PlacementService(db).create(doc)
