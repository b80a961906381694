"""
Shared route dependencies: settings and per-request service instances.
"""

from fastapi import Depends, Request
from pymongo.database import Database

from alumni_connect.core.config import Settings
from alumni_connect.db.mongodb import get_db
from alumni_connect.services.mentorship_service import MentorshipService
from alumni_connect.services.messaging_service import MessagingService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mentorship_service(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> MentorshipService:
    return MentorshipService(db, strict=settings.strict_mentorship_access)


def get_messaging_service(
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> MessagingService:
    return MessagingService(db, strict=settings.strict_mentorship_access)
