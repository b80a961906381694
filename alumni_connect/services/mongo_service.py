"""
MongoDB Service - CRUD operations for the directory and content collections.

Collections handled here:
1. users              - accounts and profiles (role, college, career fields)
2. posts              - alumni feed
3. interview_guides   - interview questions/tips shared by alumni and staff
4. assessments        - practice tests (staff authored)
5. assessment_results - a user's attempt at an assessment
6. events             - campus events (staff organised)

Mentorships, messages and placements have their own service modules.

Documents are stored with camelCase field names so they go out on the
wire as-is; serialize_doc() only turns "_id" into a string "id".
"""

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from alumni_connect.core.exceptions import NotFoundError, ValidationError
from alumni_connect.db.mongodb import COLLECTIONS

logger = logging.getLogger(__name__)

# Profile fields embedded when a record is joined with its author/organizer
AUTHOR_FIELDS = ("username", "fullName", "role", "company", "position", "avatar")
ORGANIZER_FIELDS = ("username", "fullName", "role", "avatar")


# ============================================================
# HELPERS: ids, serialization, joins
# ============================================================

def to_object_id(value: str, name: str = "record") -> ObjectId:
    """Parse a client-supplied id, raising a 400 for malformed values."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {name} id")


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs: Iterable[dict]) -> List[dict]:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def public_user(doc: Optional[dict]) -> Optional[dict]:
    """Serialize a user document without its password hash."""
    user = serialize_doc(doc)
    if user is not None:
        user.pop("passwordHash", None)
    return user


def user_summary(user: Optional[dict], fields: Iterable[str]) -> Optional[dict]:
    """Pick the id plus a subset of profile fields from a public user."""
    if user is None:
        return None
    summary = {"id": user["id"]}
    for field in fields:
        summary[field] = user.get(field)
    return summary


def contains(term: str) -> re.Pattern:
    """Case-insensitive substring match, with the term taken literally."""
    return re.compile(re.escape(term), re.IGNORECASE)


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles user accounts and profiles.
    Usernames and emails are unique (enforced by index as well).
    """

    PROFILE_FIELDS = (
        "fullName", "college", "graduationYear", "department",
        "company", "position", "location", "bio", "avatar",
    )

    def __init__(self, db: Database):
        self.collection: Collection = db[COLLECTIONS["users"]]

    def create(self, data: dict, password_hash: str) -> dict:
        """
        Insert a new user.

        Args:
            data: validated registration payload (camelCase keys, no password)
            password_hash: bcrypt hash of the chosen password

        Returns:
            The stored user without the password hash
        """
        existing = self.collection.find_one(
            {"$or": [{"username": data["username"]}, {"email": data["email"]}]}
        )
        if existing:
            raise ValidationError("User already exists")

        doc = {**data, "passwordHash": password_hash, "createdAt": datetime.utcnow()}
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ValidationError("User already exists")
        doc["_id"] = result.inserted_id

        logger.info("Registered user %s (%s, %s)", data["username"], data["role"], result.inserted_id)
        return public_user(doc)

    def get_by_id(self, user_id: str) -> Optional[dict]:
        """Fetch a public user; None for unknown or malformed ids."""
        if not ObjectId.is_valid(user_id):
            return None
        return public_user(self.collection.find_one({"_id": ObjectId(user_id)}))

    def require(self, user_id: str) -> dict:
        user = self.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_credentials(self, username: str) -> Optional[dict]:
        """Fetch the raw document (including passwordHash) for login."""
        return self.collection.find_one({"username": username})

    def get_many(self, user_ids: Iterable[str]) -> Dict[str, dict]:
        """Batch lookup used for joins. Returns {id: public user}."""
        object_ids = [ObjectId(uid) for uid in set(user_ids) if uid and ObjectId.is_valid(uid)]
        if not object_ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": object_ids}})
        return {str(doc["_id"]): public_user(doc) for doc in cursor}

    def list(self, role: Optional[str] = None, college: Optional[str] = None) -> List[dict]:
        query = {}
        if role:
            query["role"] = role
        if college:
            query["college"] = college
        cursor = self.collection.find(query).sort("createdAt", ASCENDING)
        return [public_user(doc) for doc in cursor]

    def search_alumni(self, company: Optional[str] = None, field: Optional[str] = None) -> List[dict]:
        """
        Alumni whose company matches `company`, or whose department or
        position matches `field`. Both filters are OR-combined.
        """
        query: dict = {"role": "alumni"}
        clauses = []
        if company:
            clauses.append({"company": contains(company)})
        if field:
            clauses.append({"department": contains(field)})
            clauses.append({"position": contains(field)})
        if clauses:
            query["$or"] = clauses
        return [public_user(doc) for doc in self.collection.find(query)]

    def update_profile(self, user_id: str, updates: dict) -> dict:
        """Apply a partial profile update. Only PROFILE_FIELDS are writable."""
        changes = {k: v for k, v in updates.items() if k in self.PROFILE_FIELDS}
        if not changes:
            raise ValidationError("No fields to update")

        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(user_id, "user")},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFoundError("User not found")
        logger.info("Updated profile %s: %s", user_id, ", ".join(sorted(changes)))
        return public_user(doc)

    def count_by_role(self, role: str) -> int:
        return self.collection.count_documents({"role": role})


# ============================================================
# CONTENT COLLECTIONS
# Independent records owned by a user, joined with a profile summary
# ============================================================

class _OwnedContentService:
    """Shared insert/list/join logic for author-owned collections."""

    collection_key: str = ""
    owner_field: str = "authorId"
    owner_key: str = "author"
    owner_fields: tuple = AUTHOR_FIELDS

    def __init__(self, db: Database):
        self.collection: Collection = db[COLLECTIONS[self.collection_key]]
        self.users = UserService(db)

    def _insert(self, doc: dict) -> dict:
        doc = {**doc, "createdAt": datetime.utcnow()}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def _with_owner(self, docs: List[dict]) -> List[dict]:
        """Attach owner summaries; a missing owner yields None, not an error."""
        rows = serialize_docs(docs)
        owners = self.users.get_many(row.get(self.owner_field) for row in rows)
        for row in rows:
            row[self.owner_key] = user_summary(owners.get(row.get(self.owner_field)), self.owner_fields)
        return rows


class PostService(_OwnedContentService):
    """Alumni feed posts."""

    collection_key = "posts"

    def create(self, author_id: str, data: dict) -> dict:
        post = self._insert({**data, "authorId": author_id, "likes": 0, "comments": 0})
        logger.info("Post %s created by %s", post["id"], author_id)
        return post

    def list(self, company: Optional[str] = None, field: Optional[str] = None) -> List[dict]:
        """Newest first; company/field are OR-combined substring filters."""
        clauses = []
        if company:
            clauses.append({"company": contains(company)})
        if field:
            clauses.append({"field": contains(field)})
        query = {"$or": clauses} if clauses else {}
        docs = list(self.collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)]))
        return self._with_owner(docs)


class InterviewGuideService(_OwnedContentService):
    collection_key = "interview_guides"

    def create(self, author_id: str, data: dict) -> dict:
        guide = self._insert({**data, "authorId": author_id})
        logger.info("Interview guide %s (%s) created by %s", guide["id"], data["company"], author_id)
        return guide

    def list(self, company: Optional[str] = None) -> List[dict]:
        query = {"company": contains(company)} if company else {}
        docs = list(self.collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)]))
        return self._with_owner(docs)


class EventService(_OwnedContentService):
    collection_key = "events"
    owner_field = "organizerId"
    owner_key = "organizer"
    owner_fields = ORGANIZER_FIELDS

    def create(self, organizer_id: str, data: dict) -> dict:
        event = self._insert({**data, "organizerId": organizer_id})
        logger.info("Event %s scheduled by %s", event["id"], organizer_id)
        return event

    def list(self) -> List[dict]:
        docs = list(self.collection.find().sort("date", DESCENDING))
        return self._with_owner(docs)


# ============================================================
# ASSESSMENTS + RESULTS
# ============================================================

class AssessmentService:
    """Practice assessments; questions carry the index of the right option."""

    def __init__(self, db: Database):
        self.collection: Collection = db[COLLECTIONS["assessments"]]

    def create(self, data: dict) -> dict:
        doc = {**data, "createdAt": datetime.utcnow()}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Assessment %s created", result.inserted_id)
        return serialize_doc(doc)

    def list(self) -> List[dict]:
        return serialize_docs(self.collection.find().sort("title", ASCENDING))

    def get(self, assessment_id: str) -> dict:
        doc = self.collection.find_one({"_id": to_object_id(assessment_id, "assessment")})
        if doc is None:
            raise NotFoundError("Assessment not found")
        return serialize_doc(doc)


class AssessmentResultService:
    def __init__(self, db: Database):
        self.collection: Collection = db[COLLECTIONS["assessment_results"]]
        self.assessments = AssessmentService(db)

    def create(self, user_id: str, data: dict) -> dict:
        # The referenced assessment must exist
        self.assessments.get(data["assessmentId"])

        doc = {**data, "userId": user_id, "createdAt": datetime.utcnow()}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("User %s scored %s/%s on assessment %s",
                    user_id, data["score"], data["totalQuestions"], data["assessmentId"])
        return serialize_doc(doc)

    def list_for_user(self, user_id: str) -> List[dict]:
        cursor = self.collection.find({"userId": user_id}).sort("createdAt", DESCENDING)
        return serialize_docs(cursor)
