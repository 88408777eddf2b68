"""
SQLAlchemy engine, session factory and declarative base.

The concept caches only read from these tables; readers open a short-lived
session per load from ``SessionLocal``.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str) -> Engine:
    """
    Create an engine for *url*.

    SQLite connections are shared with worker threads (repositories read via
    asyncio.to_thread) and run in WAL mode so reads don't block the writer.
    """
    sqlite = _is_sqlite(url)
    engine = create_engine(
        url,
        connect_args={"check_same_thread": False} if sqlite else {},
        echo=False,
        pool_pre_ping=True,
    )

    if sqlite:

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=15000")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """
    Create the concept tables if they don't exist.

    Args:
        bind: Engine to create the tables on (defaults to the configured engine)
    """
    from . import models  # noqa: F401  (registers tables on Base)

    Base.metadata.create_all(bind=bind or engine)
