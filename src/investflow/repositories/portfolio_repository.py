"""
Portfolio repository: the persistence collaborator used by `PortfolioService`.

Adds the name-based lookups the service needs on top of `BaseRepository`,
and names the generic operations the way the service calls them
(`find_by_id`, `exists_by_id`, `delete_by_id`, ...).
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from investflow.models.portfolio import Portfolio
from .base_repository import BaseRepository, RepositoryError

logger = logging.getLogger(__name__)


class PortfolioRepository(BaseRepository[Portfolio]):
    """Repository for Portfolio entity operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Portfolio, db)

    # =================================================================================================================
    # Name lookups
    # =================================================================================================================

    async def exists_by_name(self, name: str) -> bool:
        """
        Whether any portfolio is stored under `name` (exact, case-sensitive match).
        """
        return await self._name_taken(name)

    async def exists_by_name_excluding(self, name: str, portfolio_id: int) -> bool:
        """
        Whether a portfolio *other than* `portfolio_id` is stored under `name`.
        Used when renaming: keeping your own name is not a conflict.
        """
        return await self._name_taken(name, exclude_id=portfolio_id)

    async def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        try:
            query = select(Portfolio.id).where(Portfolio.name == name)
            if exclude_id is not None:
                query = query.where(Portfolio.id != exclude_id)

            result = await self.db.execute(query.limit(1))
            taken = result.scalar() is not None

            logger.debug(
                "repo.portfolio.name_lookup",
                extra={"portfolio_name": name, "exclude_id": exclude_id, "taken": taken},
            )
            return taken
        except Exception as e:
            logger.error(f"Error checking portfolio name {name!r}: {e}")
            raise RepositoryError("Failed to check portfolio name") from e

    # =================================================================================================================
    # Collaborator interface
    # =================================================================================================================

    async def find_by_id(self, portfolio_id: int) -> Portfolio | None:
        return await self.get_by_id(portfolio_id)

    async def find_all(self) -> list[Portfolio]:
        """Every stored portfolio, in store-native order (no ORDER BY)."""
        return await self.get_all(limit=None)

    async def exists_by_id(self, portfolio_id: int) -> bool:
        return await self.exists(portfolio_id)

    async def delete_by_id(self, portfolio_id: int) -> bool:
        return await self.delete(portfolio_id)
