"""
Application-level exceptions raised by repositories and services.

Callers (services, tests, any HTTP adapter) only ever see these classes;
driver/SQLAlchemy errors are translated before they leave the repository layer.
"""

from typing import Iterable


class RepositoryError(Exception):
    """
    Base exception for repository/service errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names involved (e.g. ['name'])
    - constraint: optional DB constraint name (for logs only, never in payloads)
    - error_code: canonical short code ('duplicate', 'not_found', ...)
    """

    # canonical error_code -> HTTP status an adapter should use
    ERROR_CODE_TO_STATUS = {
        "duplicate": 409,
        "invalid_field": 422,
        "not_found": 404,
        "invalid_input": 422,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        parts = [repr(self.message)]
        if self.fields:
            parts.append(f"fields={self.fields!r}")
        if self.constraint:
            parts.append(f"constraint={self.constraint!r}")
        if self.error_code:
            parts.append(f"error_code={self.error_code!r}")
        return f"{type(self).__name__}({', '.join(parts)})"

    def to_payload(self) -> dict:
        """
        JSON-serializable body for API responses:

            {"detail": "...", "code": "duplicate", "fields": ["name"]}

        The constraint name is deliberately left out.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """Status for this error; 400 when the code is unknown or missing."""
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(RepositoryError):
    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="not_found")


class DuplicateError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class InvalidFieldError(RepositoryError):
    """Raised when a caller passes fields the model does not define."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields, error_code="invalid_field")


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError"
]
