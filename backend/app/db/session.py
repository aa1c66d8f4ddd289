"""Engine and session factory configuration."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine tuned for the target backend.

    PostgreSQL gets a pre-pinged, recycled QueuePool with TCP keepalives.
    SQLite (local runs and tests) gets a single shared connection when the
    database lives in memory so every session sees the same tables.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, future=True, **kwargs)

    # pool_pre_ping: Test connections before using (handles stale connections)
    # pool_recycle: Recycle connections after 30 minutes (prevents timeout)
    return create_engine(
        database_url,
        echo=echo,
        future=True,
        poolclass=QueuePool,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_size=5,
        max_overflow=10,
        connect_args={
            "connect_timeout": 10,
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        },
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Create missing tables (local development and tests)."""
    # Models must be imported so they register on the metadata
    from app.db import models  # noqa: F401
    from app.db.base import Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
