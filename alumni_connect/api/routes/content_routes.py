"""
Content Routes - feed, interview guides, assessments, events

GET /feed - Alumni posts (filter by company, field)
POST /feed - Create post
GET /interview-guides - Guides (filter by company)
POST /interview-guides - Create guide (alumni/staff)
GET /assessments - All assessments
GET /assessments/{assessment_id} - One assessment
POST /assessments - Create assessment (staff)
POST /assessment-results - Submit own result
GET /assessment-results/user/{user_id} - Results of a user (self or staff)
GET /events - Events, latest date first
POST /events - Create event (staff)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from alumni_connect.core.auth import get_current_user, require_roles
from alumni_connect.core.exceptions import AuthorizationError
from alumni_connect.db.mongodb import get_db
from alumni_connect.schemas.schemas import (
    AssessmentCreate, AssessmentResponse, AssessmentResultCreate, AssessmentResultResponse,
    EventCreate, EventResponse, InterviewGuideCreate, InterviewGuideResponse,
    PostCreate, PostResponse
)
from alumni_connect.services.mongo_service import (
    AssessmentResultService,
    AssessmentService,
    EventService,
    InterviewGuideService,
    PostService,
)

router = APIRouter(tags=["Content"])


# ============================================================
# FEED
# ============================================================

@router.get("/feed", response_model=List[PostResponse])
async def get_feed(
    company: Optional[str] = Query(None),
    field: Optional[str] = Query(None),
    db: Database = Depends(get_db)
):
    """Newest posts first, each with its author."""
    return PostService(db).list(company=company, field=field)


@router.post("/feed", response_model=PostResponse)
async def create_post(
    data: PostCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db)
):
    post = PostService(db).create(user["id"], data.to_document())
    post["author"] = user
    return post


# ============================================================
# INTERVIEW GUIDES
# ============================================================

@router.get("/interview-guides", response_model=List[InterviewGuideResponse])
async def get_interview_guides(
    company: Optional[str] = Query(None),
    db: Database = Depends(get_db)
):
    return InterviewGuideService(db).list(company=company)


@router.post("/interview-guides", response_model=InterviewGuideResponse)
async def create_interview_guide(
    data: InterviewGuideCreate,
    user: dict = Depends(require_roles("alumni", "staff")),
    db: Database = Depends(get_db)
):
    """Share an interview guide. Alumni and staff only."""
    guide = InterviewGuideService(db).create(user["id"], data.to_document())
    guide["author"] = user
    return guide


# ============================================================
# ASSESSMENTS
# ============================================================

@router.get("/assessments", response_model=List[AssessmentResponse])
async def get_assessments(db: Database = Depends(get_db)):
    return AssessmentService(db).list()


@router.get("/assessments/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(assessment_id: str, db: Database = Depends(get_db)):
    return AssessmentService(db).get(assessment_id)


@router.post("/assessments", response_model=AssessmentResponse)
async def create_assessment(
    data: AssessmentCreate,
    user: dict = Depends(require_roles("staff")),
    db: Database = Depends(get_db)
):
    """Create an assessment. Staff only."""
    return AssessmentService(db).create(data.to_document())


@router.post("/assessment-results", response_model=AssessmentResultResponse)
async def submit_assessment_result(
    data: AssessmentResultCreate,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db)
):
    """Record the caller's attempt at an assessment."""
    return AssessmentResultService(db).create(user["id"], data.to_document())


@router.get("/assessment-results/user/{user_id}", response_model=List[AssessmentResultResponse])
async def get_user_results(
    user_id: str,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db)
):
    """Users can only view their own results unless they're staff."""
    if user_id != user["id"] and user["role"] != "staff":
        raise AuthorizationError()
    return AssessmentResultService(db).list_for_user(user_id)


# ============================================================
# EVENTS
# ============================================================

@router.get("/events", response_model=List[EventResponse])
async def get_events(db: Database = Depends(get_db)):
    return EventService(db).list()


@router.post("/events", response_model=EventResponse)
async def create_event(
    data: EventCreate,
    user: dict = Depends(require_roles("staff")),
    db: Database = Depends(get_db)
):
    """Create an event. Staff only."""
    event = EventService(db).create(user["id"], data.to_document())
    event["organizer"] = user
    return event
