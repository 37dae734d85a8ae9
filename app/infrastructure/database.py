"""SQLAlchemy engine, session factory and declarative base."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

settings = get_settings()


def build_engine(url: str):
    """Create an engine; SQLite URLs get thread-safe settings for FastAPI."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """One session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def request_isolation_level(db: Session, level: str) -> None:
    """Pin the isolation level of the session's current transaction.

    The level can only be chosen when the connection is acquired, so a
    transaction already open on the session (e.g. the auth lookup) is
    committed first. SQLite only knows SERIALIZABLE semantics, so it is
    left alone there.
    """
    if db.get_bind().dialect.name == "sqlite":
        return
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={"isolation_level": level})
