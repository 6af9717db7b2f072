"""End-to-end tests for the HTTP endpoints."""

from __future__ import annotations

import json

from careercoach.main import create_app
from careercoach.services.fallbacks import FALLBACK_QUIZ_QUESTIONS
from careercoach.services.generation import EXTENSION_KEY


def test_index(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "message" in response.get_json()


def test_create_app_reads_generation_config_from_env(mongo_db):
    app = create_app()

    assert app.extensions[EXTENSION_KEY].enabled is False


def test_login_flow_creates_user_and_session(client):
    issued = client.post("/api/auth/request-code", json={}).get_json()
    code = issued["code"]

    verified = client.post("/api/auth/verify", json={"code": code, "name": "Ada"})
    assert verified.status_code == 200
    token = verified.get_json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    session = client.get("/api/auth/session", headers=headers).get_json()
    assert session["subject"] == code

    me = client.get("/api/users/me", headers=headers).get_json()["user"]
    assert me["name"] == "Ada"
    assert me["onboarded"] is False

    # The code can be re-entered later to get back into the same workspace.
    again = client.post("/api/auth/verify", json={"code": code.lower()})
    assert again.status_code == 200
    assert again.get_json()["userId"] == verified.get_json()["userId"]

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/session", headers=headers).status_code == 401


def test_verify_rejects_unknown_code(client):
    assert client.post("/api/auth/verify", json={"code": "ZZZZZZ"}).status_code == 401
    assert client.post("/api/auth/verify", json={}).status_code == 400
    assert client.post("/api/auth/verify", json={"code": None}).status_code == 400


def test_requests_without_identity_are_unauthorized(client):
    assert client.get("/api/cover-letters").status_code == 401
    response = client.post("/api/cover-letters", headers={"Authorization": "Bearer bogus"}, json={})
    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid or expired session."


def test_session_without_profile_is_not_found(client, auth_headers):
    response = client.get("/api/insights", headers=auth_headers("GHOST1"))

    assert response.status_code == 404
    assert response.get_json()["error"] == "User not found."


def test_profile_update(client, user, auth_headers):
    headers = auth_headers("WORK01")

    response = client.put(
        "/api/users/me",
        headers=headers,
        json={"industry": "Healthcare", "experience": 3, "skills": ["HL7"], "bio": "Clinician"},
    )
    assert response.status_code == 200
    assert response.get_json()["user"]["industry"] == "Healthcare"

    bad = client.put("/api/users/me", headers=headers, json={"industry": ""})
    assert bad.status_code == 400


def test_cover_letter_endpoints(client, user, other_user, auth_headers):
    headers = auth_headers("WORK01")

    created = client.post(
        "/api/cover-letters",
        headers=headers,
        json={"jobTitle": "Backend Engineer", "companyName": "Acme", "jobDescription": "Build APIs"},
    )
    assert created.status_code == 201
    letter = created.get_json()["coverLetter"]
    assert letter["status"] == "completed"
    assert "Backend Engineer" in letter["content"]
    assert "Acme" in letter["content"]

    listing = client.get("/api/cover-letters", headers=headers).get_json()["coverLetters"]
    assert [item["id"] for item in listing] == [letter["id"]]

    assert client.get(f"/api/cover-letters/{letter['id']}", headers=headers).status_code == 200
    stranger = auth_headers("WORK02")
    assert client.get(f"/api/cover-letters/{letter['id']}", headers=stranger).status_code == 404
    assert client.delete(f"/api/cover-letters/{letter['id']}", headers=stranger).status_code == 404

    assert client.delete(f"/api/cover-letters/{letter['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/cover-letters/{letter['id']}", headers=headers).status_code == 404


def test_cover_letter_requires_title_and_company(client, user, auth_headers):
    response = client.post("/api/cover-letters", headers=auth_headers("WORK01"), json={"jobTitle": "SRE"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "companyName is required."


def test_insights_endpoint(client, user, auth_headers):
    response = client.get("/api/insights", headers=auth_headers("WORK01"))

    assert response.status_code == 200
    insights = response.get_json()["insights"]
    assert insights["industry"] == "Software Development"
    assert len(insights["salaryRanges"]) == 5
    assert insights["demandLevel"] in {"High", "Medium", "Low"}
    assert insights["marketOutlook"] in {"Positive", "Neutral", "Negative"}


def test_insights_use_the_injected_orchestrator(ai_orchestrator, user, auth_headers):
    payload = {"salaryRanges": [{"role": "SRE", "min": 1, "max": 3, "median": 2, "location": "Remote"}]}
    orchestrator, client_stub = ai_orchestrator(json.dumps(payload))
    app = create_app(orchestrator=orchestrator)

    response = app.test_client().get("/api/insights", headers=auth_headers("WORK01"))

    assert response.get_json()["insights"]["salaryRanges"] == payload["salaryRanges"]
    assert len(client_stub.calls) == 1


def test_interview_endpoints(client, user, auth_headers):
    headers = auth_headers("WORK01")

    quiz = client.post("/api/interview/quiz", headers=headers).get_json()["questions"]
    assert len(quiz) == 10

    answers = [question["correctAnswer"] for question in quiz]
    answers[0] = "POST"
    saved = client.post(
        "/api/interview/assessments",
        headers=headers,
        json={"questions": quiz, "answers": answers},
    )
    assert saved.status_code == 201
    assessment = saved.get_json()["assessment"]
    assert assessment["quizScore"] == 0.9
    assert assessment["improvementTip"] is None
    assert assessment["questions"][0]["isCorrect"] is False
    assert assessment["questions"][0]["userAnswer"] == "POST"
    assert assessment["questions"][0]["correctAnswer"] == quiz[0]["correctAnswer"]

    listing = client.get("/api/interview/assessments", headers=headers).get_json()["assessments"]
    assert [item["id"] for item in listing] == [assessment["id"]]


def test_assessment_payload_validation(client, user, auth_headers):
    headers = auth_headers("WORK01")

    missing = client.post("/api/interview/assessments", headers=headers, json={"answers": []})
    assert missing.status_code == 400

    empty = client.post(
        "/api/interview/assessments", headers=headers, json={"questions": [], "answers": []}
    )
    assert empty.status_code == 400

    scalar_answers = client.post(
        "/api/interview/assessments",
        headers=headers,
        json={"questions": FALLBACK_QUIZ_QUESTIONS[:1], "answers": "PUT"},
    )
    assert scalar_answers.status_code == 400
