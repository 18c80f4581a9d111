"""Database session and metadata configuration."""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import Settings, get_settings


def connect_args_for(settings: Settings) -> Dict[str, Any]:
    """DBAPI connect arguments bounding how long one statement may run.

    PostgreSQL cancels statements past ``statement_timeout``; SQLite gives up
    waiting on a locked database after ``timeout`` seconds. Either way the
    driver raises and the open transaction is rolled back.
    """

    backend = make_url(settings.database_url).get_backend_name()
    if backend == "postgresql":
        timeout_ms = int(settings.request_timeout_seconds * 1000)
        return {"options": f"-c statement_timeout={timeout_ms}"}
    if backend == "sqlite":
        return {"timeout": settings.request_timeout_seconds}
    return {}


settings = get_settings()

engine = create_engine(
    settings.database_url,
    echo=settings.sql_echo,
    connect_args=connect_args_for(settings),
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()


def init_db() -> None:
    """Create all tables known to the metadata."""

    from .. import models  # noqa: F401  registers mappers on Base

    Base.metadata.create_all(bind=engine)


def get_db() -> Generator:
    """Yield a database session for request lifetime.

    Closing a session with an open transaction rolls it back, so a request
    that is abandoned mid-way never leaves a partial commit behind.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
