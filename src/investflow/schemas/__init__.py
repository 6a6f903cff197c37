from .portfolio import CreatePortfolioRequest, UpdatePortfolioRequest, PortfolioResponse

__all__ = [
    "CreatePortfolioRequest",
    "UpdatePortfolioRequest",
    "PortfolioResponse",
]
