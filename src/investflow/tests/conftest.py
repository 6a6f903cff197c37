"""
Core pytest configuration for the whole suite.

Only the database and logging setup shared by every kind of test lives here.
Domain fixtures (repositories, services, sample portfolios) are in
`tests/test_fixtures/` and re-exported at the bottom of this file so any test
module can use them without importing.
"""

from __future__ import annotations

import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from pytest import FixtureRequest
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
)

from investflow.config import get_settings
from investflow.core.logging.builder import setup_logging, stop_queue_logging
from investflow.database.base import Base
from investflow.database.session import get_session_maker
from investflow import models  # noqa: F401  registers every model on Base.metadata
from .test_fixtures.logging_fixtures import reattach_pytest_handlers, restore_logging  # noqa: F401

settings = get_settings()
logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------------------------

@pytest.fixture(scope="session", autouse=True)
def configure_logging(request: FixtureRequest):
    """Install the application logging config once for the session."""
    setup_logging(settings)
    reattach_pytest_handlers(request)
    yield
    stop_queue_logging()


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


def safe_log_db_url(db_url: str) -> str:
    """The URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    Resolution order:
    1. `TEST_DATABASE_URL` environment variable (CI override)
    2. the app's DATABASE_URL when TESTING=true and TEST_POSTGRES_DB is set
    3. in-memory SQLite, no server needed
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return SQLITE_MEMORY_URL


TEST_DATABASE_URL = get_test_database_url()
logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


def _make_test_engine(url: str) -> AsyncEngine:
    if url == SQLITE_MEMORY_URL:
        # one shared connection, otherwise every checkout sees an empty database
        return create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, pool_pre_ping=True)


# ------------------------------------------------------------------------------------------------
# Database fixtures
# ------------------------------------------------------------------------------------------------

@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh engine and schema per test. Services commit for real, so isolation
    comes from dropping the tables afterwards rather than from rolling back.
    """
    engine = _make_test_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture()
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    # same factory settings as the application (expire_on_commit=False)
    async with get_session_maker(async_engine)() as session:
        yield session
        await session.rollback()


# Fixtures shared across test packages
from .test_fixtures.repository_fixtures import (  # noqa: E402
    base_repo,
    portfolio_repository,
    sample_portfolio_data,
    create_portfolio,
    created_portfolio,
    multiple_portfolios,
)
from .test_fixtures.service_fixtures import (  # noqa: E402
    portfolio_service,
    create_request,
    mock_repository,
    mocked_service,
)
