"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from alumni_connect.api.routes.auth_routes import router as auth_router
from alumni_connect.api.routes.user_routes import router as user_router
from alumni_connect.api.routes.content_routes import router as content_router
from alumni_connect.api.routes.placement_routes import router as placement_router
from alumni_connect.api.routes.mentorship_routes import router as mentorship_router
from alumni_connect.api.routes.message_routes import router as message_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(content_router)
api_router.include_router(placement_router)
api_router.include_router(mentorship_router)
api_router.include_router(message_router)
