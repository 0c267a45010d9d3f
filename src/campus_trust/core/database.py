"""Database engine, session factory and declarative base for the trust store."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check is turned off for them.
    """

    connect_args = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    return create_engine(database_url, future=True, connect_args=connect_args)


settings = get_settings()

engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()


def get_db() -> Generator:
    """Yield a request-scoped session; routers commit or roll back explicitly."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def enum_values(enum_cls) -> list[str]:
    """Persist enum members by value so the database sees the lowercase labels."""

    return [member.value for member in enum_cls]
