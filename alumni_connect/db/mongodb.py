"""
MongoDB Connection Utility

Every entity lives in MongoDB:
- users, posts, interview_guides, assessments, assessment_results,
  events, placements (content collections)
- mentorships, messages (the relationship + chat log)

The client is built once by the app factory and the Database handle is
kept on app.state; nothing here holds a module-level connection.
"""
import logging

from fastapi import Request
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from alumni_connect.core.config import Settings

logger = logging.getLogger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "posts": "posts",
    "interview_guides": "interview_guides",
    "assessments": "assessments",
    "assessment_results": "assessment_results",
    "events": "events",
    "placements": "placements",
    "mentorships": "mentorships",
    "messages": "messages",
}


def create_mongo_client(settings: Settings) -> MongoClient:
    """Create the MongoDB client (connection pooling handled internally by pymongo)."""
    return MongoClient(settings.mongodb_uri)


def get_database(client: MongoClient, settings: Settings) -> Database:
    """Get the application database from a client."""
    return client[settings.mongodb_db]


def ping(db: Database) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        db.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB ping failed: %s", e)
        return False


def init_indexes(db: Database) -> None:
    """
    Create indexes for lookups, sort orders and uniqueness rules.
    Call this once during app startup.
    """
    users = db[COLLECTIONS["users"]]
    users.create_index("username", unique=True)
    users.create_index("email", unique=True)
    users.create_index("role")
    users.create_index("college")

    mentorships = db[COLLECTIONS["mentorships"]]
    mentorships.create_index("mentorId")
    mentorships.create_index("menteeId")
    mentorships.create_index([("createdAt", DESCENDING)])
    # One mentorship per unordered pair; pairKey is the sorted ids
    mentorships.create_index("pairKey", unique=True)

    messages = db[COLLECTIONS["messages"]]
    messages.create_index([("mentorshipId", ASCENDING), ("createdAt", ASCENDING)])
    messages.create_index([("receiverId", ASCENDING), ("isRead", ASCENDING)])

    db[COLLECTIONS["posts"]].create_index([("createdAt", DESCENDING)])
    db[COLLECTIONS["interview_guides"]].create_index("company")
    db[COLLECTIONS["assessments"]].create_index("title")
    db[COLLECTIONS["assessment_results"]].create_index([("userId", ASCENDING), ("assessmentId", ASCENDING)])
    db[COLLECTIONS["events"]].create_index([("date", DESCENDING)])

    placements = db[COLLECTIONS["placements"]]
    placements.create_index("company")
    placements.create_index([("year", DESCENDING)])

    logger.info("MongoDB indexes created")


def get_db(request: Request) -> Database:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/users")
        async def list_users(db: Database = Depends(get_db)):
            ...
    """
    return request.app.state.db
