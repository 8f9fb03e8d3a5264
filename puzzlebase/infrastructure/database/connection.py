"""Database engine and session factory (PostgreSQL).

Repositories receive a session factory and use it as a context manager:

    with session_factory() as session:
        ...

The managed factory below rolls back on any error and always closes the
session, so repository code never handles connection lifecycle itself.
"""
import os
import re
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

_engine = None
_SessionLocal = None

# Matches a postgres(ql):// URL anywhere inside a string.
_PG_URL_RE = re.compile(r"(postgres(?:ql)?://\S+)")


def _resolve_database_url(env_var: str = "DATABASE_URL") -> str:
    """Read a database URL from environment and return a clean SQLAlchemy URL.

    Handles:
    - Leading/trailing whitespace or newlines from copy-paste.
    - Literal surrounding quotes pasted in dashboards.
    - Full ``psql`` command pasted instead of just the URL.
    - ``postgres://`` scheme that SQLAlchemy rejects (needs ``postgresql://``).
    """
    raw = os.environ.get(env_var, "").strip()

    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'"):
        raw = raw[1:-1].strip()

    match = _PG_URL_RE.search(raw)
    url = match.group(1) if match else raw

    # Strip trailing quote that may remain from psql 'url'
    url = url.rstrip("'\"").strip()

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    return url


def _build_engine(url: str):
    """Create a pooled SQLAlchemy engine, logging the masked host."""
    masked = url.split("@")[-1].split("?")[0] if "@" in url else "<no-host>"
    print(f"[PUZZLEBASE] Initialising engine -> {masked}")
    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=15,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False,
    )


def init_engine(url: str | None = None) -> None:
    """Initialise the engine from `url` or the DATABASE_URL environment variable."""
    global _engine, _SessionLocal

    url = url or _resolve_database_url("DATABASE_URL")
    if not url:
        print("[PUZZLEBASE] DATABASE_URL is empty -- skipping database init.")
        return

    _engine = _build_engine(url)
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def get_engine():
    """Return the active SQLAlchemy engine (may be None)."""
    return _engine


def create_tables(engine=None) -> None:
    """Create puzzle tables and indexes (idempotent)."""
    from puzzlebase.infrastructure.database.models import Base

    engine = engine or _engine
    if engine is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")
    Base.metadata.create_all(bind=engine)
    print("[PUZZLEBASE] Tables verified.")


def check_health(engine=None) -> bool:
    """Lightweight connectivity probe."""
    engine = engine or _engine
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def managed_session_factory(sessionmaker_=None):
    """Wrap a sessionmaker so each `with` block rolls back on error and closes."""

    @contextmanager
    def _managed_session():
        sf = sessionmaker_ or _SessionLocal
        if sf is None:
            raise RuntimeError("Database not initialised. Call init_engine() first.")
        session = sf()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _managed_session
