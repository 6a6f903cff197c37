"""
Classify SQLAlchemy IntegrityErrors by the constraint kind that failed.

The classes below are internal labels only. `mapper.py` turns them into the
public errors from `base.py`; nothing outside the exceptions package should
raise or catch them.
"""
import logging
from enum import Enum
from typing import Type
from sqlalchemy.exc import IntegrityError
from .base import RepositoryError

logger = logging.getLogger(__name__)


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolationError):
    """NOT NULL violation (missing required field)."""


class ForeignKeyConstraintError(ConstraintViolationError):
    """Foreign key constraint violated."""


class CheckConstraintError(ConstraintViolationError):
    """CHECK constraint violated."""


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized integrity error."""


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


SQLSTATE_EXCEPTION_MAP: dict[str, Type[ConstraintViolationError]] = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ForeignKeyConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintError,
}

# Message fragments per kind, checked in order (SQLite, MySQL, asyncpg text)
MESSAGE_KEYWORDS: list[tuple[Type[ConstraintViolationError], tuple[str, ...]]] = [
    (UniqueConstraintError, ("unique constraint", "unique violation", "duplicate")),
    (NotNullConstraintError, ("not null constraint", "not-null constraint", "null value in column")),
    (ForeignKeyConstraintError, ("foreign key constraint", "is not present in table")),
    (CheckConstraintError, ("check constraint",)),
]


def _sqlstate_of(orig) -> str | None:
    # psycopg exposes `pgcode`/`sqlstate`; asyncpg (via the SQLAlchemy adapter) `sqlstate`
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _constraint_name_of(orig) -> str | None:
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    return getattr(orig, "constraint_name", None)


def _classify_from_sqlstate(orig) -> tuple[Type[ConstraintViolationError] | None, str | None]:
    sqlstate = _sqlstate_of(orig)
    if not sqlstate:
        return None, None

    constraint_name = _constraint_name_of(orig)
    exception_class = SQLSTATE_EXCEPTION_MAP.get(sqlstate)
    if exception_class is None:
        logger.warning(
            "integrity.unknown_sqlstate",
            extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
        )
        return UnknownIntegrityError, constraint_name

    logger.debug(
        "integrity.sqlstate",
        extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
    )
    return exception_class, constraint_name


def _classify_from_message(msg: str) -> Type[ConstraintViolationError]:
    normalized = (msg or "").lower()
    for exception_class, keywords in MESSAGE_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return exception_class

    logger.warning("integrity.unknown_message", extra={"message_snippet": normalized[:200]})
    return UnknownIntegrityError


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Return (constraint kind, constraint name if the driver reports one).

    SQLSTATE codes are trusted first; message matching is the fallback for
    drivers that report none (SQLite, MySQL).
    """
    orig = exc.orig

    exception_class, constraint_name = _classify_from_sqlstate(orig)
    if exception_class is not None:
        return exception_class, constraint_name

    return _classify_from_message(str(orig) if orig is not None else str(exc)), None
