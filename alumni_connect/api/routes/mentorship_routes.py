"""
Mentorship Routes

GET /mentorships - List mentorships (filter by mentorId, menteeId)
POST /mentorships - Request a mentorship
PATCH /mentorships/{mentorship_id}/status - Accept, decline or complete
DELETE /mentorships/{mentorship_id} - Delete a mentorship and its messages
GET /mentorships/{mentorship_id}/messages - Conversation, oldest first
POST /mentorships/{mentorship_id}/messages - Send a message
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from alumni_connect.api.deps import get_mentorship_service, get_messaging_service
from alumni_connect.core.auth import get_current_user
from alumni_connect.schemas.schemas import (
    ChatMessageCreate, ChatMessageDetailResponse, ChatMessageResponse, MentorshipCreate,
    MentorshipDetailResponse, MentorshipResponse, MentorshipStatusUpdate, MessageResponse
)
from alumni_connect.services.mentorship_service import MentorshipService
from alumni_connect.services.messaging_service import MessagingService

router = APIRouter(prefix="/mentorships", tags=["Mentorships"])


@router.get("", response_model=List[MentorshipDetailResponse])
async def list_mentorships(
    mentor_id: Optional[str] = Query(None, alias="mentorId"),
    mentee_id: Optional[str] = Query(None, alias="menteeId"),
    user: dict = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service)
):
    """Newest first, with full mentor and mentee profiles."""
    return service.list_mentorships(mentor_id=mentor_id, mentee_id=mentee_id)


@router.post("", response_model=MentorshipResponse)
async def request_mentorship(
    data: MentorshipCreate,
    user: dict = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service)
):
    """
    Request a mentorship between mentorId and menteeId.

    Always created as pending. Fails with 400 for self-requests or when the
    pair already has a mentorship, 403 across colleges, 404 for unknown users.
    """
    return service.request_mentorship(
        requester_id=user["id"],
        mentor_id=data.mentor_id,
        mentee_id=data.mentee_id,
        field=data.field
    )


@router.patch("/{mentorship_id}/status", response_model=MentorshipResponse)
async def update_mentorship_status(
    mentorship_id: str,
    data: MentorshipStatusUpdate,
    user: dict = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service)
):
    return service.update_status(mentorship_id, user["id"], data.status)


@router.delete("/{mentorship_id}", response_model=MessageResponse)
async def delete_mentorship(
    mentorship_id: str,
    user: dict = Depends(get_current_user),
    service: MentorshipService = Depends(get_mentorship_service)
):
    service.delete_mentorship(mentorship_id, user["id"])
    return MessageResponse(message="Mentorship deleted successfully")


# ============================================================
# CONVERSATION
# ============================================================

@router.get("/{mentorship_id}/messages", response_model=List[ChatMessageDetailResponse])
async def list_messages(
    mentorship_id: str,
    user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service)
):
    """Clients poll this endpoint for new messages."""
    return service.list_messages(mentorship_id, user["id"])


@router.post("/{mentorship_id}/messages", response_model=ChatMessageResponse)
async def send_message(
    mentorship_id: str,
    data: ChatMessageCreate,
    user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service)
):
    return service.send_message(
        mentorship_id,
        sender_id=user["id"],
        receiver_id=data.receiver_id,
        content=data.content
    )
