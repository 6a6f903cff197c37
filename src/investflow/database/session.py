"""
Async engine, session factory and the transaction boundary used by services.

Repositories only `flush()`; deciding *when* work becomes permanent belongs to
the service layer, which wraps each operation in `transaction()`:

    async with transaction(session):                  # read-write
        ...
    async with transaction(session, read_only=True):  # never commits
        ...
"""
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from investflow.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_engine() -> AsyncEngine:
    """Create the process-wide AsyncEngine lazily, on first use."""
    settings = get_settings()
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,   # Set to False in production
        pool_pre_ping=True,              # Enables connection health checks
    )


def get_session_maker(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded attributes readable after commit,
    # avoiding implicit lazy-load IO on an async session.
    return async_sessionmaker(
        bind=engine or get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session and make sure it is closed afterwards."""
    async with get_session_maker()() as session:
        yield session


@asynccontextmanager
async def transaction(session: AsyncSession, *, read_only: bool = False):
    """
    Run a unit of work on `session`.

    - read_only=False: commit when the block exits cleanly, roll back and
      re-raise on any exception.
    - read_only=True: never commit. A read that opened the transaction ends
      it with a rollback whether it succeeds or fails; a read inside a
      transaction the caller already opened leaves it alone.
    """
    if read_only:
        owns_transaction = not session.in_transaction()
        try:
            yield session
        except Exception:
            if owns_transaction:
                logger.debug("db.transaction.rollback", extra={"read_only": True})
                await session.rollback()
            raise
        if owns_transaction:
            await session.rollback()
        return

    try:
        yield session
    except Exception:
        logger.debug("db.transaction.rollback")
        await session.rollback()
        raise

    await session.commit()
    logger.debug("db.transaction.commit")
