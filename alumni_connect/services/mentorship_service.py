"""
Mentorship Service - the mentor/mentee relationship and its lifecycle.

    pending --accept--> active --complete--> completed
       \
        --decline--> rejected

Rules enforced on request:
- a user cannot request themselves
- both users must exist and share the same college
- at most one mentorship per unordered {mentor, mentee} pair

The pair rule is backed by a unique index on "pairKey" (the two ids,
sorted), so two concurrent requests for the same pair cannot both insert.

With strict=True (the default, see Settings.strict_mentorship_access) only
the two parties may change or delete a mentorship, and only the party who
did not send a request may accept or decline it.
"""

import logging
from datetime import datetime
from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from alumni_connect.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from alumni_connect.db.mongodb import COLLECTIONS
from alumni_connect.services.mongo_service import (
    UserService,
    serialize_doc,
    to_object_id,
)

logger = logging.getLogger(__name__)

PENDING = "pending"
ACTIVE = "active"
REJECTED = "rejected"
COMPLETED = "completed"

STATUSES = (PENDING, ACTIVE, REJECTED, COMPLETED)

# Allowed status changes; rejected and completed are terminal
TRANSITIONS = {
    PENDING: {ACTIVE, REJECTED},
    ACTIVE: {COMPLETED},
    REJECTED: set(),
    COMPLETED: set(),
}

DECISIONS = {"accept": ACTIVE, "decline": REJECTED}

SELF_REQUEST_MESSAGE = "You cannot send a mentorship request to yourself"
CROSS_COLLEGE_MESSAGE = "Mentorship requests are only allowed between users from the same college"
DUPLICATE_MESSAGE = "A mentorship request already exists between these users"


def pair_key(user_a: str, user_b: str) -> str:
    """Order-independent key for a pair of user ids."""
    return ":".join(sorted((user_a, user_b)))


def is_party(mentorship: dict, user_id: str) -> bool:
    return user_id in (mentorship["mentorId"], mentorship["menteeId"])


class MentorshipService:
    """Creates mentorships and drives their status transitions."""

    def __init__(self, db: Database, strict: bool = True):
        self.collection: Collection = db[COLLECTIONS["mentorships"]]
        self.messages: Collection = db[COLLECTIONS["messages"]]
        self.users = UserService(db)
        self.strict = strict

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def _load(self, mentorship_id: str) -> dict:
        doc = self.collection.find_one({"_id": to_object_id(mentorship_id, "mentorship")})
        if doc is None:
            raise NotFoundError("Mentorship not found")
        return doc

    def get(self, mentorship_id: str) -> dict:
        return serialize_doc(self._load(mentorship_id))

    def find_between(self, user_a: str, user_b: str) -> Optional[dict]:
        """Existing mentorship connecting the two users, in either direction."""
        doc = self.collection.find_one({
            "$or": [
                {"mentorId": user_a, "menteeId": user_b},
                {"mentorId": user_b, "menteeId": user_a},
            ]
        })
        return serialize_doc(doc)

    def require_party(self, mentorship: dict, user_id: str) -> None:
        """Strict mode only: the caller must be the mentor or the mentee."""
        if self.strict and not is_party(mentorship, user_id):
            raise AuthorizationError("Only the mentor or mentee can access this mentorship")

    # --------------------------------------------------------
    # Create
    # --------------------------------------------------------

    def request_mentorship(
        self,
        requester_id: str,
        mentor_id: str,
        mentee_id: str,
        field: Optional[str] = None
    ) -> dict:
        """
        Create a pending mentorship between mentor and mentee.

        The requester is whichever party sent the request: a student asking
        an alumnus for mentoring, or an alumnus inviting a student.
        """
        if mentor_id == mentee_id:
            raise ConflictError(SELF_REQUEST_MESSAGE)

        if self.strict and requester_id not in (mentor_id, mentee_id):
            raise AuthorizationError("You can only request mentorships you are part of")

        mentor = self.users.get_by_id(mentor_id)
        mentee = self.users.get_by_id(mentee_id)
        if not mentor or not mentee:
            raise NotFoundError("User not found")

        if mentor.get("college") != mentee.get("college"):
            logger.warning("Cross-college mentorship request rejected: %s -> %s", mentee_id, mentor_id)
            raise AuthorizationError(CROSS_COLLEGE_MESSAGE)

        if self.find_between(mentor_id, mentee_id):
            logger.warning("Duplicate mentorship request rejected: %s / %s", mentor_id, mentee_id)
            raise ConflictError(DUPLICATE_MESSAGE)

        doc = {
            "mentorId": mentor_id,
            "menteeId": mentee_id,
            "requesterId": requester_id,
            "pairKey": pair_key(mentor_id, mentee_id),
            "status": PENDING,
            "field": field,
            "createdAt": datetime.utcnow(),
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent request for the same pair
            raise ConflictError(DUPLICATE_MESSAGE)
        doc["_id"] = result.inserted_id

        logger.info("Mentorship %s requested by %s (mentor=%s, mentee=%s)",
                    result.inserted_id, requester_id, mentor_id, mentee_id)
        return serialize_doc(doc)

    # --------------------------------------------------------
    # Status transitions
    # --------------------------------------------------------

    def respond_to_request(self, mentorship_id: str, responder_id: str, decision: str) -> dict:
        """Accept (-> active) or decline (-> rejected) a pending request."""
        if decision not in DECISIONS:
            raise ValidationError("Decision must be 'accept' or 'decline'")

        mentorship = self._load(mentorship_id)
        self.require_party(mentorship, responder_id)
        requester = mentorship.get("requesterId")
        if self.strict and requester and requester == responder_id:
            raise AuthorizationError("Only the recipient of a mentorship request can respond to it")

        return self._transition(mentorship, DECISIONS[decision])

    def update_status(self, mentorship_id: str, caller_id: str, status: str) -> dict:
        """
        Generic status change used by PATCH /mentorships/{id}/status.
        active/rejected are answers to a request; completed closes an
        active mentorship.
        """
        if status not in STATUSES:
            raise ValidationError("Invalid status")

        if status == ACTIVE:
            return self.respond_to_request(mentorship_id, caller_id, "accept")
        if status == REJECTED:
            return self.respond_to_request(mentorship_id, caller_id, "decline")

        mentorship = self._load(mentorship_id)
        self.require_party(mentorship, caller_id)
        return self._transition(mentorship, status)

    def _transition(self, mentorship: dict, target: str) -> dict:
        current = mentorship["status"]
        if target not in TRANSITIONS.get(current, set()):
            raise ValidationError(f"Cannot change mentorship status from {current} to {target}")

        # Conditional on the status we validated against
        updated = self.collection.find_one_and_update(
            {"_id": mentorship["_id"], "status": current},
            {"$set": {"status": target, "updatedAt": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ConflictError("Mentorship was modified by another request, please reload")

        logger.info("Mentorship %s: %s -> %s", mentorship["_id"], current, target)
        return serialize_doc(updated)

    # --------------------------------------------------------
    # Delete
    # --------------------------------------------------------

    def delete_mentorship(self, mentorship_id: str, caller_id: str) -> dict:
        """Hard delete, together with the relationship's message log."""
        mentorship = self._load(mentorship_id)
        self.require_party(mentorship, caller_id)

        self.collection.delete_one({"_id": mentorship["_id"]})
        removed = self.messages.delete_many({"mentorshipId": str(mentorship["_id"])})

        logger.info("Mentorship %s deleted by %s (%d messages removed)",
                    mentorship["_id"], caller_id, removed.deleted_count)
        return serialize_doc(mentorship)

    # --------------------------------------------------------
    # List
    # --------------------------------------------------------

    def list_mentorships(
        self,
        mentor_id: Optional[str] = None,
        mentee_id: Optional[str] = None
    ) -> List[dict]:
        """
        Newest first, each row joined with the current mentor and mentee
        profiles. Rows whose mentor or mentee no longer exists are dropped.
        """
        query = {}
        if mentor_id:
            query["mentorId"] = mentor_id
        if mentee_id:
            query["menteeId"] = mentee_id

        docs = list(self.collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)]))
        user_ids = [d["mentorId"] for d in docs] + [d["menteeId"] for d in docs]
        users = self.users.get_many(user_ids)

        rows = []
        for doc in docs:
            mentor = users.get(doc["mentorId"])
            mentee = users.get(doc["menteeId"])
            if mentor is None or mentee is None:
                continue
            row = serialize_doc(doc)
            row["mentor"] = mentor
            row["mentee"] = mentee
            rows.append(row)
        return rows
