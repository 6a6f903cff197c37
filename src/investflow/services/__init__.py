from .portfolio_service import PortfolioService

__all__ = ["PortfolioService"]
