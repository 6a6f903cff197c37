"""
Handler factories for `logging.config.dictConfig`.

Each function returns a plain handler-config dict; the builder decides which of
them are wired in. The formatter names ("json", "standard") and filter names
("request_id", "redact") must exist in the builder's mapping.
"""

from pathlib import Path

from investflow.config.settings import Settings

_FILTERS = ["request_id", "redact"]


def _formatter_for(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """Stream handler (stderr) at LOG_LEVEL, formatted per LOG_FORMAT."""
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_for(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(_FILTERS),
    }


def _rotating_file(settings: Settings, filename: str, *, level: str, formatter: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": formatter,
        "level": level,
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(_FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    """All records at LOG_LEVEL and above, to LOG_DIR/app.log."""
    return _rotating_file(settings, "app.log", level=settings.LOG_LEVEL, formatter=_formatter_for(settings))


def get_error_file_handler(settings: Settings) -> dict:
    # errors are always structured, whatever LOG_FORMAT says
    return _rotating_file(settings, "errors.log", level="ERROR", formatter="json")


def get_error_console_handler(settings: Settings) -> dict:
    """ERROR and above as JSON on the console, used when no files are written."""
    return {
        "class": "logging.StreamHandler",
        "formatter": "json",
        "level": "ERROR",
        "filters": list(_FILTERS),
    }
