# investflow/core/logging/
# ├─ __init__.py            # public API
# ├─ builder.py             # make_dict_config(settings) + setup_logging(settings)
# ├─ formatters.py          # JsonFormatter, ColorFormatter
# ├─ filters.py             # RequestIdFilter, RedactFilter, correlation-id helpers
# └─ handlers.py            # handler-config factories (console, rotating files)

from .builder import setup_logging, make_dict_config, stop_queue_logging, get_queue_stats
from .filters import set_request_id, get_request_id, reset_request_id, bind_request_id, RequestIdFilter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "stop_queue_logging",
    "get_queue_stats",
    "set_request_id",
    "get_request_id",
    "reset_request_id",
    "bind_request_id",
    "RequestIdFilter",
]
