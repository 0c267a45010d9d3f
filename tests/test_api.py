import uuid

import pytest
from fastapi.testclient import TestClient

from campus_trust.core.database import get_db
from campus_trust.main import create_app
from campus_trust.models import Severity, User, UserRole, ViolationType
from campus_trust.services.moderation_service import ModerationVerdict


@pytest.fixture()
def people(session_factory):
    session = session_factory()
    admin = User(username="head.admin", name="Head Admin", role=UserRole.ADMIN)
    student = User(username="sam.lee", name="Sam Lee", role=UserRole.STUDENT)
    session.add_all([admin, student])
    session.commit()
    ids = {"admin": str(admin.user_id), "student": str(student.user_id)}
    session.close()
    return ids


def _client(session_factory, classifier=None):
    app = create_app(content_classifier=classifier)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture()
def client(session_factory):
    with _client(session_factory) as test_client:
        yield test_client


def test_health(client):
    assert client.get("/api/v1/health").json() == {"status": "ok"}


def test_scope_and_key_flow(client, people):
    grade = client.post(
        "/api/v1/scopes",
        json={"actor_id": people["admin"], "kind": "grade", "grade_number": 3, "access_code": "G3X"},
    )
    assert grade.status_code == 201
    assert grade.json()["access_code"] == "G3X"

    orphan = client.post(
        "/api/v1/scopes",
        json={"actor_id": people["admin"], "kind": "section", "section_name": "9-A", "access_code": "S9A"},
    )
    assert orphan.status_code == 400

    section = client.post(
        "/api/v1/scopes",
        json={"actor_id": people["admin"], "kind": "section", "section_name": "3-A", "access_code": "S3A"},
    ).json()

    forbidden = client.post(
        "/api/v1/scopes",
        json={"actor_id": people["student"], "kind": "grade", "grade_number": 4, "access_code": "G4"},
    )
    assert forbidden.status_code == 403

    listing = client.get("/api/v1/scopes").json()
    assert all("access_code" not in scope for scope in listing)

    body = {"user_id": people["student"], "scope_id": section["scope_id"], "access_code": "nope"}
    assert client.post("/api/v1/keys/unlock", json=body).status_code == 400

    body["access_code"] = "S3A"
    first = client.post("/api/v1/keys/unlock", json=body).json()
    second = client.post("/api/v1/keys/unlock", json=body).json()
    assert (first["already_held"], second["already_held"]) == (False, True)
    assert first["key"]["key_id"] == second["key"]["key_id"]

    check = client.get(f"/api/v1/keys/check/{section['scope_id']}", params={"user_id": people["student"]})
    assert check.json() == {"has_access": True}

    blocked = client.delete(f"/api/v1/scopes/{grade.json()['scope_id']}", params={"actor_id": people["admin"]})
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["category"] == "sections"

    blocked = client.delete(f"/api/v1/scopes/{section['scope_id']}", params={"actor_id": people["admin"]})
    assert blocked.json()["detail"] == {
        "message": "Cannot delete scope: 1 user(s) have access to this scope",
        "category": "digital_keys",
        "count": 1,
    }


def test_handover_then_old_admin_loses_rights(client, people):
    response = client.post(
        "/api/v1/admin/handover",
        json={"current_admin_id": people["admin"], "successor_id": people["student"]},
    )
    assert response.status_code == 200
    assert response.json()["record"]["new_admin_id"] == people["student"]

    again = client.post(
        "/api/v1/admin/promote",
        json={"current_admin_id": people["admin"], "user_id": people["student"]},
    )
    assert again.status_code == 403

    history = client.get("/api/v1/admin/succession-history", params={"actor_id": people["student"]})
    assert len(history.json()) == 1


def test_student_id_registration(client, people):
    issued = client.post(
        "/api/v1/admin/student-ids",
        json={"admin_id": people["admin"], "username": "jane.doe", "grade": 2, "class_name": "2-B"},
    )
    assert issued.status_code == 201
    code = issued.json()["student_id"]

    mismatch = client.post("/api/v1/registrations", json={"student_id": code, "username": "john"})
    assert mismatch.status_code == 400

    created = client.post("/api/v1/registrations", json={"student_id": code, "username": "jane.doe"})
    assert created.status_code == 201
    assert created.json()["name"] == "Jane Doe"

    reused = client.post("/api/v1/registrations", json={"student_id": code, "username": "jane.doe"})
    assert reused.status_code == 409

    unknown = client.post("/api/v1/registrations", json={"student_id": "ZZZZZZZZ", "username": "jane.doe"})
    assert unknown.status_code == 404


def test_rating_and_reputation(client, people):
    post = client.post("/api/v1/posts", json={"author_id": people["student"], "content": "Library closes at 5"})
    assert post.status_code == 201
    post_id = post.json()["post_id"]

    bad = client.post(f"/api/v1/posts/{post_id}/rate-accuracy", json={"user_id": people["admin"], "rating": 6})
    assert bad.status_code == 400

    rated = client.post(f"/api/v1/posts/{post_id}/rate-accuracy", json={"user_id": people["admin"], "rating": 4})
    assert rated.json()["author_credibility"] == pytest.approx(80.0)
    assert rated.json()["post_credibility"] == pytest.approx(80.0)

    reputation = client.post(f"/api/v1/reputation/{people['student']}/calculate").json()
    assert reputation["reputation"] == pytest.approx(2.0 + 1.5 * 80.0)


def test_punishment_preview(client):
    response = client.post(
        "/api/v1/moderation/punishment",
        json={"violation_type": "hate_speech", "severity": "critical", "prior_violation_count": 0},
    )
    assert response.json() == {
        "punishment_type": "permanent_ban",
        "credibility_penalty": 50.0,
        "ban_duration_hours": None,
    }


def test_flagged_post_returns_punishment(session_factory, people):
    def classifier(content, content_type):
        return ModerationVerdict(True, ViolationType.SPAM, Severity.LOW, reasoning="spam link")

    with _client(session_factory, classifier) as test_client:
        response = test_client.post("/api/v1/posts", json={"author_id": people["student"], "content": "buy now"})

    assert response.status_code == 400
    assert response.json()["detail"] == {
        "message": "Content blocked: spam link",
        "punishment": "warning",
        "credibility_lost": 2.0,
    }

    session = session_factory()
    try:
        assert session.get(User, uuid.UUID(people["student"])).credibility_score == pytest.approx(48.0)
    finally:
        session.close()
