import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pulse import models  # noqa: F401  (registers tables on Base)
from pulse.database import Base
from pulse.wiring import bootstrap


@pytest.fixture(autouse=True)
def _reset_process_singletons():
    """
    Keep the process-wide caches from leaking between tests.
    """
    bootstrap.reset_singletons()
    yield
    bootstrap.reset_singletons()


@pytest.fixture
def session_factory():
    """In-memory SQLite shared across threads (repositories read via asyncio.to_thread)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    yield factory
    engine.dispose()
