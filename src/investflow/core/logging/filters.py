"""
Logging filters.

RequestIdFilter stamps every record with the correlation id of the current
unit of work (a contextvar, so it follows the caller across awaits). Whoever
drives the service layer (an HTTP adapter, a job runner, a test) binds the id:

    with bind_request_id("abc-123"):
        await service.save(request)

RedactFilter masks record attributes whose names look like secrets.
"""

import logging
from logging import LogRecord
import contextvars
from contextlib import contextmanager
from uuid import uuid4

# None means "no id bound in this context"
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """Set the id for the current context; returns a token for `reset_request_id`."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token):
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


@contextmanager
def bind_request_id(request_id: str | None = None):
    """
    Bind a correlation id (a fresh uuid4 hex when not given) for the duration of
    the block and restore the previous one afterwards.
    """
    rid = request_id or uuid4().hex
    token = set_request_id(rid)
    try:
        yield rid
    finally:
        reset_request_id(token)


class RequestIdFilter(logging.Filter):
    """
    Guarantee `record.request_id` exists: an explicit `extra={"request_id": ...}`
    wins, then the contextvar, then the sentinel "-".
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password", "secret", "token", "access_token", "refresh_token",
        "authorization", "postgres_password", "database_url",
    }
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
