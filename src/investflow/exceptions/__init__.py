# investflow/exceptions/
# ├── base.py                    # App-level errors (RepositoryError, DuplicateError, ...)
# ├── portfolio.py               # Portfolio domain errors raised by the service
# ├── integrity_classifier.py    # SQL-level constraint classification
# └── mapper.py                  # SQL-level -> app-level translation

from .base import RepositoryError, NotFoundError, DuplicateError, InvalidFieldError
from .portfolio import PortfolioAlreadyExistsError, PortfolioNotFoundError

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "DuplicateError",
    "InvalidFieldError",
    "PortfolioAlreadyExistsError",
    "PortfolioNotFoundError",
]
