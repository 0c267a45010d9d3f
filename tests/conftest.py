import itertools
import os

import pytest

os.environ.setdefault("CAMPUS_TRUST_DATABASE_URL", "sqlite://")

from sqlalchemy import event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from campus_trust import models  # noqa: E402,F401
from campus_trust.core.config import get_settings  # noqa: E402
from campus_trust.core.database import Base, build_engine  # noqa: E402
from campus_trust.models import Scope, ScopeKind, User, UserRole  # noqa: E402


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'trust.db'}")

    # pysqlite defers BEGIN on its own; take over so SAVEPOINTs nest correctly.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture()
def settings_override(monkeypatch):
    def _apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"CAMPUS_TRUST_{key.upper()}", str(value))
        get_settings.cache_clear()

    yield _apply
    get_settings.cache_clear()


@pytest.fixture()
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.STUDENT, username=None, credibility=50.0, **fields):
        n = next(counter)
        user = User(
            username=username or f"user{n}",
            name=f"User {n}",
            role=role,
            credibility_score=credibility,
            **fields,
        )
        db.add(user)
        db.flush()
        return user

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user(role=UserRole.ADMIN, username="head.admin")


@pytest.fixture()
def grade_and_section(db):
    grade = Scope(name="Grade 3", kind=ScopeKind.GRADE, grade_number=3, access_code="G3X")
    section = Scope(
        name="Class 3-A",
        kind=ScopeKind.SECTION,
        section_name="3-A",
        parent_grade_number=3,
        access_code="S3A",
    )
    db.add_all([grade, section])
    db.flush()
    return grade, section
