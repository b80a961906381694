"""
Messaging Service - per-mentorship message log with read tracking.

Messages are append-only: after insert only isRead changes, and only
from False to True. Clients poll list_messages(); there is no push.
"""

import logging
from datetime import datetime
from typing import List

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from alumni_connect.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from alumni_connect.db.mongodb import COLLECTIONS
from alumni_connect.services.mentorship_service import MentorshipService, is_party
from alumni_connect.services.mongo_service import (
    UserService,
    serialize_doc,
    to_object_id,
    user_summary,
)

logger = logging.getLogger(__name__)

PARTICIPANT_FIELDS = ("username", "fullName", "avatar")


class MessagingService:
    """Send, list and mark-read for messages scoped to one mentorship."""

    def __init__(self, db: Database, strict: bool = True):
        self.collection: Collection = db[COLLECTIONS["messages"]]
        self.mentorships = MentorshipService(db, strict=strict)
        self.users = UserService(db)
        self.strict = strict

    def send_message(
        self,
        mentorship_id: str,
        sender_id: str,
        receiver_id: str,
        content: str
    ) -> dict:
        """
        Append a text message. The mentorship's status is not checked:
        pending or rejected relationships accept messages too.
        """
        content = (content or "").strip()
        if not content or not receiver_id:
            raise ValidationError("Content and receiverId are required")

        to_object_id(mentorship_id, "mentorship")
        if self.strict:
            mentorship = self.mentorships.get(mentorship_id)
            if not is_party(mentorship, sender_id):
                raise AuthorizationError("Only the mentor or mentee can send messages in this mentorship")
            if receiver_id == sender_id or not is_party(mentorship, receiver_id):
                raise ValidationError("Receiver must be the other participant of this mentorship")

        doc = {
            "mentorshipId": mentorship_id,
            "senderId": sender_id,
            "receiverId": receiver_id,
            "content": content,
            "messageType": "text",
            "isRead": False,
            "createdAt": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        logger.info("Message %s sent in mentorship %s (%s -> %s)",
                    result.inserted_id, mentorship_id, sender_id, receiver_id)
        return serialize_doc(doc)

    def list_messages(self, mentorship_id: str, caller_id: str) -> List[dict]:
        """
        All messages of a mentorship, oldest first, with sender/receiver
        summaries. _id breaks ties between equal timestamps so repeated
        reads return the same sequence.
        """
        to_object_id(mentorship_id, "mentorship")
        if self.strict:
            mentorship = self.mentorships.get(mentorship_id)
            if not is_party(mentorship, caller_id):
                raise AuthorizationError("Only the mentor or mentee can read this conversation")

        cursor = self.collection.find({"mentorshipId": mentorship_id}).sort(
            [("createdAt", ASCENDING), ("_id", ASCENDING)]
        )
        rows = [serialize_doc(doc) for doc in cursor]

        users = self.users.get_many(
            [row["senderId"] for row in rows] + [row["receiverId"] for row in rows]
        )
        for row in rows:
            row["sender"] = user_summary(users.get(row["senderId"]), PARTICIPANT_FIELDS)
            row["receiver"] = user_summary(users.get(row["receiverId"]), PARTICIPANT_FIELDS)
        return rows

    def mark_read(self, message_id: str, caller_id: str) -> dict:
        """Set isRead=True. Calling it again is a no-op."""
        doc = self.collection.find_one({"_id": to_object_id(message_id, "message")})
        if doc is None:
            raise NotFoundError("Message not found")

        if self.strict and caller_id not in (doc["senderId"], doc["receiverId"]):
            raise AuthorizationError("Only the sender or receiver can update this message")

        if not doc["isRead"]:
            self.collection.update_one({"_id": doc["_id"]}, {"$set": {"isRead": True}})
            doc["isRead"] = True
            logger.debug("Message %s marked read", doc["_id"])
        return serialize_doc(doc)

    def unread_count(self, user_id: str) -> int:
        return self.collection.count_documents({"receiverId": user_id, "isRead": False})
