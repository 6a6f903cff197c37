"""
Map SQL-level failures onto the app-level errors in `base.py`.

    UniqueConstraintError     -> DuplicateError
    NotNullConstraintError    -> RepositoryError("Missing required field(s) ...")
    ForeignKeyConstraintError -> RepositoryError("... referenced entity not found ...")
    CheckConstraintError      -> RepositoryError("... business rule violated ...")
    anything else             -> RepositoryError("... database integrity error.")

Raw driver messages are only ever logged at DEBUG; the raised messages are
safe to hand to clients.
"""
import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import (
    classify_integrity_error,
    UniqueConstraintError,
    NotNullConstraintError,
    ForeignKeyConstraintError,
    CheckConstraintError,
)
from .base import DuplicateError, RepositoryError

logger = logging.getLogger(__name__)


# Column extraction patterns, one group per dialect message style:
#   Postgres: 'null value in column "name" ...' / 'Key (name)=(x) already exists.'
#   SQLite:   'UNIQUE constraint failed: portfolios.name'
#   MySQL:    "Duplicate entry 'x' for key 'portfolios.uq_portfolios_name'"
_COLUMN_PATTERNS = [
    re.compile(r'null value in column "(?P<cols>[^"]+)"', re.IGNORECASE),
    re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE),
    re.compile(r'(?:unique|not null) constraint failed: (?P<cols>.+)$', re.IGNORECASE),
    re.compile(r"duplicate entry .* for key '?(?P<cols>[^']+)'?", re.IGNORECASE),
]


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """Best-effort list of the columns named in the driver message."""
    msg = str(exc.orig) if exc.orig is not None else str(exc)

    for pattern in _COLUMN_PATTERNS:
        m = pattern.search(msg)
        if m:
            # "portfolios.name, portfolios.x" -> ["name", "x"]
            return [c.strip().strip('"').split(".")[-1] for c in m.group("cols").split(",")]

    return None


def raise_mapped_integrity_error(exc: IntegrityError, model_name: str | None = None) -> None:
    """
    Raise the app-level exception matching `exc`, with `.fields` and
    `.constraint` populated where the driver reports them.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"
    context = {"model": model_part, "fields": columns, "constraint": constraint_name}

    if exc_cls is UniqueConstraintError:
        # Expected client-level scenario (409), so INFO rather than WARNING
        logger.info("mapper.duplicate_detected", extra=context)
        detail = ", ".join(columns) if columns else (constraint_name or "unique constraint")
        raise DuplicateError(
            f"{model_part} already exists for field(s): {detail}",
            fields=columns,
            constraint=constraint_name,
        ) from exc

    if exc_cls is NotNullConstraintError:
        logger.info("mapper.not_null_violation", extra=context)
        detail = ", ".join(columns) if columns else "unknown"
        raise RepositoryError(
            f"Missing required field(s): {detail} for {model_part}",
            fields=columns,
            constraint=constraint_name,
        ) from exc

    if exc_cls is ForeignKeyConstraintError:
        logger.info("mapper.foreign_key_violation", extra=context)
        raise RepositoryError(
            f"{model_part} referenced entity not found",
            fields=columns,
            constraint=constraint_name,
        ) from exc

    raw = str(exc.orig) if exc.orig is not None else str(exc)

    if exc_cls is CheckConstraintError:
        logger.debug("mapper.check_constraint_failure", extra={**context, "raw": raw})
        raise RepositoryError(
            f"{model_part} business rule violated (check constraint).",
            constraint=constraint_name,
        ) from exc

    logger.warning("mapper.unknown_integrity_error", extra=context)
    logger.debug("mapper.unknown_integrity_raw", extra={"model": model_part, "raw": raw})
    raise RepositoryError(f"{model_part} database integrity error.") from exc


@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Wrap repository writes:

        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()

    On failure the session is rolled back, then an app-level error is raised.
    App-level errors raised inside the block pass through untouched.
    """
    try:
        yield
    except RepositoryError:
        raise
    except IntegrityError as exc:
        await _safe_rollback(db, model_name)
        raise_mapped_integrity_error(exc, model_name)
    except Exception as exc:
        await _safe_rollback(db, model_name)
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc


async def _safe_rollback(db: AsyncSession, model_name: str | None) -> None:
    try:
        await db.rollback()
    except Exception:
        # Keep the original failure as the one the caller sees
        logger.exception("Failed to rollback session", extra={"model": model_name})
