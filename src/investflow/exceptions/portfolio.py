"""
Portfolio domain errors raised by `PortfolioService`.

They subclass the generic repository errors so anything that already handles
`DuplicateError` / `NotFoundError` (payloads, status codes) keeps working.
"""

from .base import DuplicateError, NotFoundError


class PortfolioAlreadyExistsError(DuplicateError):
    """A portfolio with this name is already stored."""

    def __init__(self, name: str, *, constraint: str | None = None):
        super().__init__(
            f"Portfolio Name Already Exists: {name}",
            fields=["name"],
            constraint=constraint,
        )
        self.name = name


class PortfolioNotFoundError(NotFoundError):
    """No portfolio is stored under this id."""

    def __init__(self, portfolio_id: int):
        super().__init__(f"Portfolio Not Found: {portfolio_id}", fields=["id"])
        self.portfolio_id = portfolio_id


__all__ = ["PortfolioAlreadyExistsError", "PortfolioNotFoundError"]
