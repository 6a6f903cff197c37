"""
Portfolio lifecycle: create, look up, list, update and delete.

Each public method is one unit of work on the injected session. Writes commit
when they succeed and roll back when anything raises; reads never commit.
Entities are mapped to responses before the unit of work ends, so callers
only ever receive `PortfolioResponse` values.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from investflow.database.session import transaction
from investflow.exceptions import (
    DuplicateError,
    PortfolioAlreadyExistsError,
    PortfolioNotFoundError,
)
from investflow.mappers import to_changes, to_entity, to_response
from investflow.repositories.portfolio_repository import PortfolioRepository
from investflow.schemas.portfolio import (
    CreatePortfolioRequest,
    PortfolioResponse,
    UpdatePortfolioRequest,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    def __init__(self, db: AsyncSession, repository: PortfolioRepository | None = None):
        self.db = db
        self.repository = repository or PortfolioRepository(db)

    async def save(self, request: CreatePortfolioRequest) -> PortfolioResponse:
        """
        Create a portfolio from `request`.

        Raises:
            ValueError: request is None
            PortfolioAlreadyExistsError: the name is taken, either seen by the
                pre-check or rejected by the unique constraint on insert
        """
        if request is None:
            raise ValueError("request must not be None")

        logger.debug("service.portfolio.save.start", extra={"portfolio_name": request.name})

        async with transaction(self.db):
            if await self.repository.exists_by_name(request.name):
                logger.info("service.portfolio.save.duplicate", extra={"portfolio_name": request.name})
                raise PortfolioAlreadyExistsError(request.name)

            try:
                entity = await self.repository.save(to_entity(request))
            except DuplicateError as e:
                # lost a race with a concurrent creator
                logger.info(
                    "service.portfolio.save.duplicate",
                    extra={"portfolio_name": request.name, "constraint": e.constraint},
                )
                raise PortfolioAlreadyExistsError(request.name, constraint=e.constraint) from e

            response = to_response(entity)

        logger.info("service.portfolio.save.success", extra={"portfolio_id": response.id})
        return response

    async def find_by_id(self, portfolio_id: int) -> PortfolioResponse:
        async with transaction(self.db, read_only=True):
            entity = await self.repository.find_by_id(portfolio_id)
            if entity is None:
                logger.info("service.portfolio.find_by_id.not_found", extra={"portfolio_id": portfolio_id})
                raise PortfolioNotFoundError(portfolio_id)
            return to_response(entity)

    async def find_all(self) -> list[PortfolioResponse]:
        async with transaction(self.db, read_only=True):
            entities = await self.repository.find_all()
            responses = [to_response(entity) for entity in entities]

        logger.debug("service.portfolio.find_all.success", extra={"count": len(responses)})
        return responses

    async def delete_by_id(self, portfolio_id: int) -> None:
        """
        Raises:
            PortfolioNotFoundError: no portfolio has this id
        """
        logger.debug("service.portfolio.delete.start", extra={"portfolio_id": portfolio_id})

        async with transaction(self.db):
            if not await self.repository.exists_by_id(portfolio_id):
                logger.info("service.portfolio.delete.not_found", extra={"portfolio_id": portfolio_id})
                raise PortfolioNotFoundError(portfolio_id)

            await self.repository.delete_by_id(portfolio_id)

        logger.info("service.portfolio.delete.success", extra={"portfolio_id": portfolio_id})

    async def update_by_id(self, portfolio_id: int, request: UpdatePortfolioRequest) -> PortfolioResponse:
        """
        Apply the fields set on `request` to an existing portfolio.

        `updated_at` is refreshed by the UPDATE; `created_at` never changes.

        Raises:
            ValueError: request is None
            PortfolioNotFoundError: no portfolio has this id
            PortfolioAlreadyExistsError: the new name belongs to another portfolio
            DuplicateError: another unique constraint rejected an update that kept the name
        """
        if request is None:
            raise ValueError("request must not be None")

        changes = to_changes(request)
        logger.debug(
            "service.portfolio.update.start",
            extra={"portfolio_id": portfolio_id, "changed_fields": sorted(changes)},
        )

        async with transaction(self.db):
            if not await self.repository.exists_by_id(portfolio_id):
                logger.info("service.portfolio.update.not_found", extra={"portfolio_id": portfolio_id})
                raise PortfolioNotFoundError(portfolio_id)

            new_name = changes.get("name")
            if new_name is not None and await self.repository.exists_by_name_excluding(new_name, portfolio_id):
                logger.info(
                    "service.portfolio.update.duplicate",
                    extra={"portfolio_id": portfolio_id, "portfolio_name": new_name},
                )
                raise PortfolioAlreadyExistsError(new_name)

            try:
                entity = await self.repository.update(portfolio_id, **changes)
            except DuplicateError as e:
                if new_name is None:
                    # the conflict is not on a name this request set
                    raise
                raise PortfolioAlreadyExistsError(new_name, constraint=e.constraint) from e

            if entity is None:
                # deleted between the existence check and the update
                raise PortfolioNotFoundError(portfolio_id)

            response = to_response(entity)

        logger.info("service.portfolio.update.success", extra={"portfolio_id": portfolio_id})
        return response
