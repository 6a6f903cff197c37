"""
Repository layer: data access between the service layer and the database.

Usage:
    from investflow.repositories import PortfolioRepository
"""

from .base_repository import BaseRepository
from .portfolio_repository import PortfolioRepository

__all__ = [
    "BaseRepository",
    "PortfolioRepository",
]
