import pytest

ASSESSMENT = {
    "title": "Aptitude Basics",
    "description": "Warm-up quiz",
    "category": "aptitude",
    "timeLimit": 10,
    "totalQuestions": 2,
    "questions": [
        {"question": "2 + 2?", "options": ["3", "4"], "correctAnswer": 1},
        {"question": "5 * 3?", "options": ["15", "8", "53"], "correctAnswer": 0, "explanation": "Multiply"},
    ],
}

GUIDE = {
    "company": "Google",
    "role": "SWE Intern",
    "experience": "Two rounds of DSA.",
    "questions": ["Reverse a linked list"],
    "tips": "Practice on paper",
    "difficulty": "medium",
}


@pytest.fixture
def staff_client(login, staff):
    return login(staff)


def test_feed_create_and_list(login, alumnus, client):
    author = login(alumnus)
    author.post("/api/feed", json={"content": "We are hiring interns", "company": "Google", "field": "SWE"})
    author.post("/api/feed", json={"content": "Tips for ML roles", "company": "Meta", "field": "Machine Learning"})

    everything = client.get("/api/feed").json()
    assert [p["content"] for p in everything] == ["Tips for ML roles", "We are hiring interns"]
    assert everything[0]["author"]["username"] == alumnus["username"]
    assert everything[0]["likes"] == 0

    by_company = client.get("/api/feed", params={"company": "goo"}).json()
    assert [p["company"] for p in by_company] == ["Google"]

    either = client.get("/api/feed", params={"company": "goo", "field": "machine"}).json()
    assert len(either) == 2


def test_feed_requires_session(client):
    assert client.post("/api/feed", json={"content": "Hello"}).status_code == 401


def test_feed_rejects_blank_content(login, student):
    response = login(student).post("/api/feed", json={"content": "   "})

    assert response.status_code == 400


def test_interview_guides_by_role(login, student, alumnus, client):
    assert login(student).post("/api/interview-guides", json=GUIDE).status_code == 403

    created = login(alumnus).post("/api/interview-guides", json=GUIDE)
    assert created.status_code == 200
    assert created.json()["author"]["id"] == alumnus["id"]

    assert len(client.get("/api/interview-guides", params={"company": "GOOGLE"}).json()) == 1
    assert client.get("/api/interview-guides", params={"company": "Amazon"}).json() == []


def test_assessments_staff_only(login, student, staff_client):
    assert login(student).post("/api/assessments", json=ASSESSMENT).status_code == 403
    assert staff_client.post("/api/assessments", json=ASSESSMENT).status_code == 200


def test_assessments_sorted_by_title(staff_client, client):
    staff_client.post("/api/assessments", json={**ASSESSMENT, "title": "Zebra Puzzles"})
    staff_client.post("/api/assessments", json=ASSESSMENT)

    titles = [a["title"] for a in client.get("/api/assessments").json()]

    assert titles == ["Aptitude Basics", "Zebra Puzzles"]


def test_assessment_question_count_must_match(staff_client):
    response = staff_client.post("/api/assessments", json={**ASSESSMENT, "totalQuestions": 5})

    assert response.status_code == 400


def test_assessment_lookup(staff_client, client):
    created = staff_client.post("/api/assessments", json=ASSESSMENT).json()

    assert client.get(f"/api/assessments/{created['id']}").json()["title"] == "Aptitude Basics"
    assert client.get("/api/assessments/64b000000000000000000000").status_code == 404
    assert client.get("/api/assessments/bogus").status_code == 400


def test_assessment_results(login, student, make_user, staff_client):
    assessment = staff_client.post("/api/assessments", json=ASSESSMENT).json()
    taker = login(student)

    submitted = taker.post("/api/assessment-results", json={
        "assessmentId": assessment["id"], "score": 1, "totalQuestions": 2, "timeSpent": 95, "answers": [1, 2],
    })
    assert submitted.status_code == 200
    assert submitted.json()["userId"] == student["id"]

    assert len(taker.get(f"/api/assessment-results/user/{student['id']}").json()) == 1
    assert len(staff_client.get(f"/api/assessment-results/user/{student['id']}").json()) == 1
    assert login(make_user()).get(f"/api/assessment-results/user/{student['id']}").status_code == 403


def test_result_for_unknown_assessment(login, student):
    response = login(student).post("/api/assessment-results", json={
        "assessmentId": "64b000000000000000000000", "score": 1, "totalQuestions": 2, "timeSpent": 30,
    })

    assert response.status_code == 404


def test_events_staff_only_latest_first(login, student, staff, staff_client, client):
    event = {"title": "Alumni Meet", "description": "Annual meet", "category": "networking",
             "date": "2024-03-01T17:00:00", "location": "Main Hall"}

    assert login(student).post("/api/events", json=event).status_code == 403
    staff_client.post("/api/events", json=event)
    staff_client.post("/api/events", json={**event, "title": "Career Fair", "date": "2024-09-10T10:00:00"})

    events = client.get("/api/events").json()

    assert [e["title"] for e in events] == ["Career Fair", "Alumni Meet"]
    assert events[0]["organizer"]["id"] == staff["id"]
