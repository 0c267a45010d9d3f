import uuid

import pytest

from campus_trust.models import DigitalKey, Event, EventType, Post, Schedule, Scope, ScopeKind
from campus_trust.services import scope_service
from campus_trust.services.errors import ConflictError, DependencyBlocked, NotFound, ValidationFailed
from campus_trust.utils.datetime import utcnow


def test_grade_then_section_succeeds(db):
    grade = scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=3, access_code="G3X")
    section = scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name="3-A", access_code="S3A")

    assert grade.name == "Grade 3"
    assert section.name == "Class 3-A"
    assert section.parent_grade_number == 3
    assert [s.kind for s in scope_service.list_scopes(db)] == [ScopeKind.GRADE, ScopeKind.SECTION]


def test_section_without_parent_grade_fails(db):
    with pytest.raises(ValidationFailed) as excinfo:
        scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name="9-A", access_code="S9A")

    assert "must exist" in excinfo.value.detail
    assert excinfo.value.status_code == 400


def test_public_scope_is_singleton_and_codeless(db):
    public = scope_service.create_scope(db, kind=ScopeKind.PUBLIC, access_code="ignored")
    assert public.access_code is None

    with pytest.raises(ConflictError, match="already exists"):
        scope_service.create_scope(db, kind=ScopeKind.PUBLIC)


def test_duplicate_grade_is_conflict(db):
    scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=2, access_code="G2")

    with pytest.raises(ConflictError) as excinfo:
        scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=2, access_code="G2b")
    assert excinfo.value.status_code == 409


@pytest.mark.parametrize("grade_number", [None, 0, 7, 12])
def test_grade_number_out_of_range(db, grade_number):
    with pytest.raises(ValidationFailed, match="between 1 and 6"):
        scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=grade_number, access_code="CODE1")


@pytest.mark.parametrize("code", [None, "", "has space", "dash-code", "ümlaut"])
def test_access_code_must_be_alphanumeric(db, code):
    with pytest.raises(ValidationFailed, match="alphanumeric"):
        scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=1, access_code=code)


@pytest.mark.parametrize("section_name", ["3A", "3-a", "3-Z", "A-3", "3-AB", " ", "0-A", "3-A\n"])
def test_section_name_format(db, grade_and_section, section_name):
    with pytest.raises(ValidationFailed):
        scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name=section_name, access_code="S3X")


def test_duplicate_section_is_conflict(db, grade_and_section):
    with pytest.raises(ConflictError, match="3-A already exists"):
        scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name="3-A", access_code="Other")


def test_access_code_reuse_is_reported_as_conflict(db, grade_and_section):
    with pytest.raises(ConflictError) as excinfo:
        scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name="3-B", access_code="S3A")

    assert excinfo.value.race_lost is True
    assert scope_service.find_section_scope(db, "3-B") is None
    assert scope_service.find_section_scope(db, "3-A") is not None


def test_delete_grade_blocked_by_section_then_allowed(db, grade_and_section):
    grade, section = grade_and_section

    with pytest.raises(DependencyBlocked) as excinfo:
        scope_service.delete_scope(db, grade.scope_id)
    assert excinfo.value.category == "sections"
    assert excinfo.value.count == 1
    assert "class section" in excinfo.value.detail

    scope_service.delete_scope(db, section.scope_id)
    scope_service.delete_scope(db, grade.scope_id)
    assert scope_service.list_scopes(db) == []


def test_section_children_reported_before_keys(db, grade_and_section, make_user):
    grade, _ = grade_and_section
    db.add(DigitalKey(user_id=make_user().user_id, scope_id=grade.scope_id))
    db.flush()

    with pytest.raises(DependencyBlocked) as excinfo:
        scope_service.delete_scope(db, grade.scope_id)
    assert excinfo.value.category == "sections"


def test_delete_blocked_by_keys(db, grade_and_section, make_user):
    _, section = grade_and_section
    db.add_all(
        [
            DigitalKey(user_id=make_user().user_id, scope_id=section.scope_id),
            DigitalKey(user_id=make_user().user_id, scope_id=section.scope_id),
        ]
    )
    db.flush()

    with pytest.raises(DependencyBlocked) as excinfo:
        scope_service.delete_scope(db, section.scope_id)
    assert excinfo.value.category == "digital_keys"
    assert excinfo.value.count == 2
    assert "2 user(s)" in excinfo.value.detail


@pytest.mark.parametrize("category", ["posts", "events", "schedules"])
def test_delete_blocked_by_content(db, grade_and_section, make_user, category):
    _, section = grade_and_section
    author = make_user()
    if category == "posts":
        db.add(Post(author_id=author.user_id, scope_id=section.scope_id, content="hello"))
    elif category == "events":
        db.add(
            Event(
                title="Field trip",
                event_type=EventType.EXTRACURRICULAR,
                scope_id=section.scope_id,
                start_time=utcnow(),
                created_by_id=author.user_id,
            )
        )
    else:
        db.add(Schedule(scope_id=section.scope_id, day_of_week=1, period_number=1, subject="Math"))
    db.flush()

    with pytest.raises(DependencyBlocked) as excinfo:
        scope_service.delete_scope(db, section.scope_id)
    assert excinfo.value.category == category
    assert excinfo.value.count == 1


def test_delete_unknown_scope(db):
    with pytest.raises(NotFound):
        scope_service.delete_scope(db, uuid.uuid4())


def test_seed_default_scopes_is_idempotent(db):
    summary = scope_service.seed_default_scopes(db)
    assert summary == {"grades_created": 6, "sections_created": 30}

    again = scope_service.seed_default_scopes(db)
    assert again == {"grades_created": 0, "sections_created": 0}

    codes = [scope.access_code for scope in db.query(Scope).all()]
    assert len(codes) == len(set(codes)) == 36
    assert all(code.isalnum() for code in codes)


@pytest.mark.parametrize("section_name", ["03-A", "٣-A"])
def test_section_prefix_must_be_plain_grade_number(db, section_name):
    grade = scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=3, access_code="G3X")

    with pytest.raises(ValidationFailed, match="format"):
        scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name=section_name, access_code="S3A")

    scope_service.delete_scope(db, grade.scope_id)
    assert scope_service.find_grade_scope(db, 3) is None


def test_grade_children_are_counted_by_parent_grade(db):
    first = scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=1, access_code="G1")
    third = scope_service.create_scope(db, kind=ScopeKind.GRADE, grade_number=3, access_code="G3")
    section = scope_service.create_scope(db, kind=ScopeKind.SECTION, section_name="3-B", access_code="S3B")

    assert section.parent_grade_number == 3
    assert first.parent_grade_number is None

    with pytest.raises(DependencyBlocked) as excinfo:
        scope_service.delete_scope(db, third.scope_id)
    assert excinfo.value.category == "sections"

    scope_service.delete_scope(db, first.scope_id)
    assert scope_service.find_grade_scope(db, 3) is not None


def test_concurrent_public_scope_create_is_conflict(db, monkeypatch):
    scope_service.create_scope(db, kind=ScopeKind.PUBLIC)
    monkeypatch.setattr(scope_service, "find_public_scope", lambda session: None)

    with pytest.raises(ConflictError) as excinfo:
        scope_service.create_scope(db, kind=ScopeKind.PUBLIC, name="Second Square")

    assert excinfo.value.race_lost is True
    assert db.query(Scope).filter(Scope.kind == ScopeKind.PUBLIC).count() == 1
