"""
Logging builder: turn Settings into a dictConfig mapping, apply it, and
optionally move handler IO onto a background QueueListener.

    settings = get_settings()
    setup_logging(settings)
    ...
    stop_queue_logging()   # at shutdown, when LOG_USE_QUEUE is on

Handlers wired in:
    console                       always
    file + error_file             LOG_TO_STDOUT is false and LOG_DIR is set
    error_console                 otherwise

With LOG_USE_QUEUE the real handlers run in the listener thread; producers only
enqueue. Request-id and redaction filters are put on the QueueHandler so they
run in the producer's context, where the contextvar is visible.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import queue as _queue
import threading
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from investflow.config.settings import Settings
from investflow.utils.project_info import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

_QUEUE_LISTENER: Optional[QueueListener] = None
_QUEUE: Optional[_queue.Queue] = None

_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler for a bounded queue that drops instead of blocking the producer.

    Drops are counted (see `get_queue_stats`); every `drop_warning_threshold`-th
    drop is reported through `handleError`, which writes to stderr.
    """

    def __init__(self, q: _queue.Queue, drop_warning_threshold: int = 100):
        super().__init__(q)
        self.drop_warning_threshold = drop_warning_threshold

    def emit(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(self.prepare(record))
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1
                dropped = _DROPPED_LOGS_COUNT
            if self.drop_warning_threshold > 0 and dropped % self.drop_warning_threshold == 0:
                self.handleError(record)


def get_queue_stats() -> dict:
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping: "standard" and "json" formatters, the
    "request_id" and "redact" filters, the handlers chosen from settings, and
    the root plus sqlalchemy.engine loggers.
    """
    formatters = {
        "standard": {
            # colors only for human-readable output
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # statement logging can leak parameter values
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the dictConfig built from `settings`, then (LOG_USE_QUEUE) move the
    root handlers behind a QueueListener. Safe to call more than once: a
    running listener is stopped first.
    """
    global _QUEUE_LISTENER, _QUEUE

    stop_queue_logging()

    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    root_logger = logging.getLogger()
    # keeps %(request_id)s formattable for handlers added outside dictConfig
    if not any(isinstance(f, RequestIdFilter) for f in root_logger.filters):
        root_logger.addFilter(RequestIdFilter())

    if not settings.LOG_USE_QUEUE:
        return

    current_handlers = list(root_logger.handlers)
    if not current_handlers:
        return

    for h in current_handlers:
        root_logger.removeHandler(h)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size) if max_size > 0 else _queue.Queue()

    if max_size > 0 and not settings.LOG_QUEUE_BLOCKING:
        qh: QueueHandler = NonBlockingQueueHandler(
            log_queue, drop_warning_threshold=settings.LOG_QUEUE_DROP_WARNING_THRESHOLD
        )
    else:
        qh = QueueHandler(log_queue)

    qh.addFilter(RequestIdFilter())
    qh.addFilter(RedactFilter())

    listener = QueueListener(log_queue, *current_handlers, respect_handler_level=True)
    listener.start()
    root_logger.addHandler(qh)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def stop_queue_logging() -> None:
    """Flush and stop the background listener, if one is running."""
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()
    except Exception:
        logging.getLogger(__name__).exception("Failed to stop QueueListener cleanly")
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None
