"""Process-wide SQLAlchemy engine factory.

The match cache, the vacancy/status repositories and the Dagster resource all
share one engine per process. NullPool keeps no idle connections around:
a connection is opened for each session and handed back when it closes, which
suits short ranking runs launched one subprocess at a time.

The URL comes from ``DATABASE_URL`` when set, otherwise it is assembled from
the ``POSTGRES_*`` variables.
"""

import os
import threading

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

_lock = threading.Lock()
_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    user = os.getenv("POSTGRES_USER", "vacancy")
    password = os.getenv("POSTGRES_PASSWORD", "vacancy_dev")
    database = os.getenv("POSTGRES_DB", "vacancy_matching")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first call."""
    global _engine, _session_factory
    if _engine is None:
        with _lock:
            if _engine is None:
                _engine = create_engine(database_url(), poolclass=NullPool)
                _session_factory = sessionmaker(bind=_engine)
    return _engine


def get_session() -> Session:
    """Create a new session from the shared engine. Callers close it."""
    get_engine()
    return _session_factory()
