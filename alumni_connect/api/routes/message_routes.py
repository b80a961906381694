"""
Message Routes

GET /messages/unread-count - Unread messages addressed to the caller
PATCH /messages/{message_id}/read - Mark a message as read
"""

from fastapi import APIRouter, Depends

from alumni_connect.api.deps import get_messaging_service
from alumni_connect.core.auth import get_current_user
from alumni_connect.schemas.schemas import ChatMessageResponse, UnreadCountResponse
from alumni_connect.services.messaging_service import MessagingService

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service)
):
    return UnreadCountResponse(unread=service.unread_count(user["id"]))


@router.patch("/{message_id}/read", response_model=ChatMessageResponse)
async def mark_message_read(
    message_id: str,
    user: dict = Depends(get_current_user),
    service: MessagingService = Depends(get_messaging_service)
):
    """Idempotent: marking an already read message returns it unchanged."""
    return service.mark_read(message_id, user["id"])
