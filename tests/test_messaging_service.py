from datetime import datetime

import pytest

from alumni_connect.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from alumni_connect.services.mentorship_service import MentorshipService
from alumni_connect.services.messaging_service import MessagingService


@pytest.fixture
def messaging(db):
    return MessagingService(db, strict=True)


@pytest.fixture
def mentorship(db, student, alumnus):
    return MentorshipService(db).request_mentorship(student["id"], alumnus["id"], student["id"])


def test_send_message(messaging, mentorship, student, alumnus):
    message = messaging.send_message(mentorship["id"], student["id"], alumnus["id"], "  Hello there  ")

    assert message["content"] == "Hello there"
    assert message["isRead"] is False
    assert message["messageType"] == "text"
    assert message["mentorshipId"] == mentorship["id"]
    assert message["senderId"] == student["id"]


@pytest.mark.parametrize("content", ["", "   ", None])
def test_empty_content_rejected(messaging, mentorship, student, alumnus, content):
    with pytest.raises(ValidationError):
        messaging.send_message(mentorship["id"], student["id"], alumnus["id"], content)


def test_missing_receiver_rejected(messaging, mentorship, student):
    with pytest.raises(ValidationError):
        messaging.send_message(mentorship["id"], student["id"], None, "Hello")


def test_pending_mentorship_accepts_messages(messaging, mentorship, student, alumnus):
    assert mentorship["status"] == "pending"

    messaging.send_message(mentorship["id"], alumnus["id"], student["id"], "Happy to help")

    assert len(messaging.list_messages(mentorship["id"], student["id"])) == 1


def test_outsider_cannot_send(messaging, mentorship, alumnus, make_user):
    with pytest.raises(AuthorizationError):
        messaging.send_message(mentorship["id"], make_user()["id"], alumnus["id"], "Hi")


def test_receiver_must_be_other_party(messaging, mentorship, student, make_user):
    with pytest.raises(ValidationError):
        messaging.send_message(mentorship["id"], student["id"], student["id"], "Note to self")
    with pytest.raises(ValidationError):
        messaging.send_message(mentorship["id"], student["id"], make_user()["id"], "Hi")


def test_send_to_missing_mentorship(messaging, student, alumnus):
    with pytest.raises(NotFoundError):
        messaging.send_message("64b000000000000000000000", student["id"], alumnus["id"], "Hi")


def test_lenient_send_skips_party_checks(db, student, alumnus, make_user):
    lenient = MessagingService(db, strict=False)

    message = lenient.send_message("64b000000000000000000000", make_user()["id"], alumnus["id"], "Hi")

    assert message["receiverId"] == alumnus["id"]


def test_list_orders_by_creation_time(db, messaging, mentorship, student, alumnus):
    # Inserted out of order on purpose
    db.messages.insert_many([
        {"mentorshipId": mentorship["id"], "senderId": student["id"], "receiverId": alumnus["id"],
         "content": "third", "messageType": "text", "isRead": False, "createdAt": datetime(2024, 1, 1, 10, 2)},
        {"mentorshipId": mentorship["id"], "senderId": alumnus["id"], "receiverId": student["id"],
         "content": "first", "messageType": "text", "isRead": False, "createdAt": datetime(2024, 1, 1, 10, 0)},
        {"mentorshipId": mentorship["id"], "senderId": student["id"], "receiverId": alumnus["id"],
         "content": "second", "messageType": "text", "isRead": False, "createdAt": datetime(2024, 1, 1, 10, 1)},
    ])

    rows = messaging.list_messages(mentorship["id"], student["id"])

    assert [row["content"] for row in rows] == ["first", "second", "third"]
    assert rows[0]["sender"]["id"] == alumnus["id"]
    assert rows[0]["receiver"]["username"] == student["username"]
    assert set(rows[0]["sender"]) == {"id", "username", "fullName", "avatar"}


def test_list_is_stable_for_equal_timestamps(db, messaging, mentorship, student, alumnus):
    same_time = datetime(2024, 1, 1, 12, 0)
    for n in range(5):
        db.messages.insert_one({
            "mentorshipId": mentorship["id"], "senderId": student["id"], "receiverId": alumnus["id"],
            "content": f"msg {n}", "messageType": "text", "isRead": False, "createdAt": same_time,
        })

    first = messaging.list_messages(mentorship["id"], alumnus["id"])
    second = messaging.list_messages(mentorship["id"], alumnus["id"])

    assert [row["content"] for row in first] == [f"msg {n}" for n in range(5)]
    assert first == second


def test_list_with_missing_sender(db, messaging, mentorship, student, alumnus):
    messaging.send_message(mentorship["id"], alumnus["id"], student["id"], "Hello")
    db.messages.update_many({}, {"$set": {"senderId": "64b000000000000000000000"}})

    rows = messaging.list_messages(mentorship["id"], student["id"])

    assert rows[0]["sender"] is None


def test_outsider_cannot_list(messaging, mentorship, make_user):
    with pytest.raises(AuthorizationError):
        messaging.list_messages(mentorship["id"], make_user()["id"])


def test_mark_read_is_idempotent(messaging, mentorship, student, alumnus):
    message = messaging.send_message(mentorship["id"], student["id"], alumnus["id"], "Ping")

    first = messaging.mark_read(message["id"], alumnus["id"])
    second = messaging.mark_read(message["id"], alumnus["id"])

    assert first["isRead"] is True
    assert second["isRead"] is True


def test_mark_read_missing_message(messaging, alumnus):
    with pytest.raises(NotFoundError):
        messaging.mark_read("64b000000000000000000000", alumnus["id"])


def test_mark_read_by_outsider(messaging, mentorship, student, alumnus, make_user):
    message = messaging.send_message(mentorship["id"], student["id"], alumnus["id"], "Ping")

    with pytest.raises(AuthorizationError):
        messaging.mark_read(message["id"], make_user()["id"])


def test_unread_count(messaging, mentorship, student, alumnus):
    first = messaging.send_message(mentorship["id"], student["id"], alumnus["id"], "One")
    messaging.send_message(mentorship["id"], student["id"], alumnus["id"], "Two")
    messaging.send_message(mentorship["id"], alumnus["id"], student["id"], "Back")

    messaging.mark_read(first["id"], alumnus["id"])

    assert messaging.unread_count(alumnus["id"]) == 1
    assert messaging.unread_count(student["id"]) == 1
