"""Request-scoped database session for route handlers."""

from collections.abc import Generator

from sqlalchemy.orm import Session

from app.db.session import SessionLocal


def get_session() -> Generator[Session, None, None]:
    """Yield one session per request; services commit their own writes.

    Anything left uncommitted when the handler fails is rolled back.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
