"""Scope registry: creation, lookup and guarded deletion of access boundaries."""

from __future__ import annotations

import logging
import re
import string
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models import DigitalKey, Event, Post, Schedule, Scope, ScopeKind
from ..utils.codes import random_code
from .errors import ConflictError, DependencyBlocked, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

_ACCESS_CODE_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
ACCESS_CODE_ALPHABET = string.ascii_letters + string.digits


def _section_pattern() -> re.Pattern[str]:
    letters = re.escape(get_settings().section_letters)
    return re.compile(rf"^([1-9][0-9]*)-([{letters}])$")


def get_scope(session: Session, scope_id: UUID) -> Scope:
    scope = session.get(Scope, scope_id)
    if scope is None:
        raise NotFound(f"Scope {scope_id} not found")
    return scope


def list_scopes(session: Session) -> Sequence[Scope]:
    """Return every scope, grades before their sections."""

    stmt = select(Scope).order_by(Scope.kind, Scope.grade_number, Scope.section_name)
    return session.execute(stmt).scalars().all()


def find_public_scope(session: Session) -> Optional[Scope]:
    stmt = select(Scope).where(Scope.kind == ScopeKind.PUBLIC)
    return session.execute(stmt).scalars().first()


def find_grade_scope(session: Session, grade_number: int) -> Optional[Scope]:
    stmt = select(Scope).where(Scope.kind == ScopeKind.GRADE, Scope.grade_number == grade_number)
    return session.execute(stmt).scalar_one_or_none()


def find_section_scope(session: Session, section_name: str) -> Optional[Scope]:
    stmt = select(Scope).where(Scope.kind == ScopeKind.SECTION, Scope.section_name == section_name)
    return session.execute(stmt).scalar_one_or_none()


def _validate_access_code(access_code: Optional[str]) -> str:
    if not access_code or not _ACCESS_CODE_PATTERN.fullmatch(access_code):
        raise ValidationFailed("Access code must be alphanumeric with no spaces")
    return access_code


def create_scope(
    session: Session,
    *,
    kind: ScopeKind,
    name: Optional[str] = None,
    access_code: Optional[str] = None,
    grade_number: Optional[int] = None,
    section_name: Optional[str] = None,
) -> Scope:
    """Validate the scope's shape for its kind, then insert it.

    Public scopes carry no code and are singletons. Grade scopes need a code
    and a grade number inside the configured range. Section scopes need a
    code, a ``<grade>-<letter>`` name and an existing parent grade.
    """

    settings = get_settings()

    parent_grade_number = None

    if kind == ScopeKind.PUBLIC:
        if find_public_scope(session) is not None:
            raise ConflictError("Public square scope already exists")
        access_code = None
        grade_number = None
        section_name = None
        name = name or "Public Square"

    elif kind == ScopeKind.GRADE:
        _validate_access_code(access_code)
        if grade_number is None or not settings.min_grade <= grade_number <= settings.max_grade:
            raise ValidationFailed(
                f"Grade number must be a number between {settings.min_grade} and {settings.max_grade}"
            )
        if find_grade_scope(session, grade_number) is not None:
            raise ConflictError(f"Grade {grade_number} scope already exists")
        section_name = None
        name = name or f"Grade {grade_number}"

    elif kind == ScopeKind.SECTION:
        _validate_access_code(access_code)
        if not section_name or not section_name.strip():
            raise ValidationFailed("Section name is required for class scopes")
        match = _section_pattern().fullmatch(section_name)
        if match is None:
            raise ValidationFailed("Section name must be in format: grade-section (e.g., 1-A, 2-B)")
        parent_grade = int(match.group(1))
        if find_grade_scope(session, parent_grade) is None:
            raise ValidationFailed(
                f"Parent grade scope (Grade {parent_grade}) must exist before creating class sections"
            )
        if find_section_scope(session, section_name) is not None:
            raise ConflictError(f"Class section {section_name} already exists")
        grade_number = None
        parent_grade_number = parent_grade
        name = name or f"Class {section_name}"

    else:  # pragma: no cover - enum exhausted above
        raise ValidationFailed(f"Unknown scope kind {kind!r}")

    scope = Scope(
        name=name,
        kind=kind,
        access_code=access_code,
        grade_number=grade_number,
        section_name=section_name,
        parent_grade_number=parent_grade_number,
    )
    try:
        with session.begin_nested():
            session.add(scope)
            session.flush()
    except IntegrityError as exc:
        logger.warning("scope insert rejected by constraint: %s", exc.orig)
        raise ConflictError(
            "A scope with the same grade, section or access code already exists",
            race_lost=True,
        ) from exc

    logger.info("scope created: %s (%s)", scope.name, scope.kind.value)
    return scope


def _count(session: Session, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model).where(*criteria)
    return session.execute(stmt).scalar_one()


def delete_scope(session: Session, scope_id: UUID) -> None:
    """Delete a scope only when nothing depends on it.

    Checks run children first, then keys, then content, so the most
    specific blocking reason is reported.
    """

    scope = get_scope(session, scope_id)

    if scope.kind == ScopeKind.GRADE and scope.grade_number is not None:
        sections = _count(
            session,
            Scope,
            Scope.kind == ScopeKind.SECTION,
            Scope.parent_grade_number == scope.grade_number,
        )
        if sections > 0:
            raise DependencyBlocked(
                f"Cannot delete grade scope: {sections} class section(s) belong to this grade. "
                "Delete the class sections first.",
                category="sections",
                count=sections,
            )

    keys = _count(session, DigitalKey, DigitalKey.scope_id == scope.scope_id)
    if keys > 0:
        raise DependencyBlocked(
            f"Cannot delete scope: {keys} user(s) have access to this scope",
            category="digital_keys",
            count=keys,
        )

    for model, category, label in (
        (Post, "posts", "post(s)"),
        (Event, "events", "event(s)"),
        (Schedule, "schedules", "schedule(s)"),
    ):
        count = _count(session, model, model.scope_id == scope.scope_id)
        if count > 0:
            raise DependencyBlocked(
                f"Cannot delete scope: {count} {label} exist in this scope",
                category=category,
                count=count,
            )

    session.delete(scope)
    session.flush()
    logger.info("scope deleted: %s", scope.name)


def seed_default_scopes(session: Session, *, code_length: int = 10) -> dict[str, int]:
    """Create one grade scope per configured grade and its lettered sections.

    Does nothing when any scope already exists, so it is safe to run on every
    startup. Codes are random; admins read them back through the registry.
    """

    existing = session.execute(select(func.count()).select_from(Scope)).scalar_one()
    if existing:
        logger.info("found %s existing scopes, skipping seed", existing)
        return {"grades_created": 0, "sections_created": 0}

    settings = get_settings()
    summary = {"grades_created": 0, "sections_created": 0}
    for grade in range(settings.min_grade, settings.max_grade + 1):
        create_scope(
            session,
            kind=ScopeKind.GRADE,
            grade_number=grade,
            access_code=random_code(code_length, ACCESS_CODE_ALPHABET),
        )
        summary["grades_created"] += 1
        for letter in settings.section_letters:
            create_scope(
                session,
                kind=ScopeKind.SECTION,
                section_name=f"{grade}-{letter}",
                access_code=random_code(code_length, ACCESS_CODE_ALPHABET),
            )
            summary["sections_created"] += 1
    return summary
