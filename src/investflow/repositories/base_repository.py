"""
Base repository class providing common database operations.

A reusable foundation for repositories that talk to the database through
SQLAlchemy's async sessions. Model-specific repositories inherit the generic
CRUD below and add their own queries on top.

Repositories never commit. They `flush()` so generated values (ids, defaults)
are available, and leave commit/rollback to the service layer
(see `investflow.database.session.transaction`).
"""
from investflow.exceptions.base import RepositoryError, InvalidFieldError

from investflow.exceptions.mapper import db_error_handler
from investflow.validators.exception_validators import find_unknown_model_kwargs

import time
from typing import TypeVar, Generic, Type
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from investflow.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. Portfolio, not Portfolio()),
                used to build select(self.model), update(self.model), ...
            db: The async database session all queries run on.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Create Operations
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """
        Insert a new, unsaved entity and return it with store-assigned fields.

        `flush()` sends the INSERT so the primary key exists; `refresh()` reloads
        column defaults (timestamps) from the row. No commit happens here.

        Raises:
            DuplicateError: a unique constraint rejected the row
            RepositoryError: any other DB failure (session rolled back)
        """
        start = time.perf_counter()

        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.save.success",
            extra={
                "model": self.model.__name__,
                "operation": "save",
                "id": getattr(entity, "id", None),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    # =================================================================================================================
    # Read Operations (Single Entity)
    # =================================================================================================================

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """
        Get an entity by its primary key, or None when no row matches.

        Raises:
            RepositoryError: If the query fails.
        """
        try:
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            # primary key filter: zero or one row
            entity = result.scalar_one_or_none()

            logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id} (found={entity is not None})")
            return entity

        except Exception as e:
            logger.error(f"Error retrieving {self.model.__name__} by ID {entity_id}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__}") from e

    # =================================================================================================================
    # Read Operations (Multiple Entities)
    # =================================================================================================================

    async def get_all(
        self,
        offset: int = 0,                # how many records to skip
        limit: int | None = 100,        # page size; None returns every row
        order_by: str | None = None     # field to sort by (ASC); None keeps store order
    ) -> list[ModelType]:
        """
        Get entities with optional ordering and pagination.

        Unlike a default-sorted listing, no ORDER BY is emitted unless
        `order_by` names a real field: rows come back in store-native order.
        """
        try:
            query = select(self.model)

            if order_by:
                if hasattr(self.model, order_by):
                    query = query.order_by(getattr(self.model, order_by))
                    logger.debug(f"Ordering {self.model.__name__} by field: '{order_by}'")
                else:
                    logger.warning(
                        f"Ignored invalid 'order_by' field: '{order_by}' does not exist on {self.model.__name__}")

            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)

            result = await self.db.execute(query)
            entities = list(result.scalars().all())

            logger.debug(f"Retrieved {len(entities)} {self.model.__name__} entities")
            return entities

        except Exception as e:
            logger.error(f"Error retrieving all {self.model.__name__}: {e}")
            raise RepositoryError(f"Failed to retrieve {self.model.__name__} entities") from e

    # =================================================================================================================
    # Update Operations
    # =================================================================================================================

    async def update(self, entity_id: int, **kwargs) -> ModelType | None:
        """
        Update an entity by its ID.

        The row is loaded, changed through the ORM and flushed, so column
        `onupdate` defaults (e.g. `updated_at`) fire for the UPDATE. None
        values are dropped so a partial payload never nulls a column.

        Returns:
            The updated entity, or None if no row has that ID

        Raises:
            InvalidFieldError: unknown keys for the model
            DuplicateError: the update would violate a unique constraint
            RepositoryError: any other DB failure (session rolled back)
        """
        unknown = find_unknown_model_kwargs(self.model, kwargs)
        if unknown:
            raise InvalidFieldError(f"Unknown field(s) for {self.model.__name__}: {', '.join(unknown)}", fields=unknown)

        entity = await self.get_by_id(entity_id)
        if entity is None:
            logger.warning(f"{self.model.__name__} with ID {entity_id} not found for update")
            return None

        update_data = {k: v for k, v in kwargs.items() if v is not None}
        if not update_data:
            logger.warning(f"No valid data provided for updating {self.model.__name__}")
            return entity

        async with db_error_handler(self.db, self.model.__name__):
            for field, value in update_data.items():
                setattr(entity, field, value)
            await self.db.flush()
            # onupdate values are computed during the flush, reload them
            await self.db.refresh(entity)

        logger.debug(
            f"Updated {self.model.__name__} with ID: {entity_id}",
            extra={"updated_fields": sorted(update_data)},
        )
        return entity

    # =================================================================================================================
    # Delete Operations
    # =================================================================================================================

    async def delete(self, entity_id: int) -> bool:
        """
        Delete an entity by its ID.

        Returns:
            True if a row was deleted, False if none matched

        Raises:
            RepositoryError: For database errors (session rolled back)
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == entity_id)
            )

        if result.rowcount > 0:
            logger.debug(f"Deleted {self.model.__name__} with ID: {entity_id}")
            return True

        logger.warning(f"{self.model.__name__} with ID {entity_id} not found for deletion")
        return False

    # =================================================================================================================
    # Existence
    # =================================================================================================================

    async def exists(self, entity_id: int) -> bool:
        """
        Check whether a row with this ID exists (selects the key column only).
        """
        try:
            result = await self.db.execute(
                select(self.model.id).where(self.model.id == entity_id)
            )
            exists = result.scalar() is not None
            logger.debug(f"{self.model.__name__} with ID {entity_id} exists: {exists}")
            return exists

        except Exception as e:
            logger.error(f"Error checking existence of {self.model.__name__} {entity_id}: {e}")
            raise RepositoryError(f"Failed to check {self.model.__name__} existence") from e

