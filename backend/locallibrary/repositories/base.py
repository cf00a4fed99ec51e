"""
LocalLibrary — Generic Repository
==================================

What:  find/count/save/update/delete over one ORM model.
How:   Every operation opens its own session from the shared `Database`
       handle, so operations can run concurrently under `gather()`.
       SQLAlchemy failures (and malformed ids) are wrapped in StorageError.
Who:   Subclassed once per entity in this package; used by the services.

Expansion:
    `expand=("author", "genre")` eagerly loads the named relationships
    (selectinload), replacing the stored ids with the referenced rows.
    Relationships are lazy="raise", so anything a view renders must be
    expanded here.

Projection:
    `only=("title",)` limits the loaded columns (the id is always loaded).
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import (
    Any,
    AsyncGenerator,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
)

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from locallibrary.database import Database
from locallibrary.exceptions import StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def parse_id(value: Any) -> uuid.UUID:
    """
    Coerce a path/form id into a UUID.

    Raises:
        StorageError: the value is not a well-formed id (the lookup cannot
                      even be attempted, like a cast failure in the store)
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise StorageError(
            message=f"Cast to id failed for value '{value}'",
            context={"original_error": "ValueError", "value": str(value)},
        )


class Repository(Generic[ModelT]):
    """
    Storage operations for one entity type.

    Subclasses set:
        model:          the ORM class
        resource:       human name used in logs and NotFoundError
        default_order:  column names for find_all when no order_by is given
    """

    model: Type[ModelT]
    resource: str = "entity"
    default_order: Sequence[str] = ()

    def __init__(self, database: Database):
        self.database = database

    # ── Session / error boundary ──────────────────────────────────────────
    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with self.database.session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(
                "Storage error during %s %s: %s", operation, self.resource, str(e)
            )
            raise StorageError(
                message=f"Could not {operation} {self.resource}.",
                context={
                    "operation": operation,
                    "resource": self.resource,
                    "original_error": type(e).__name__,
                    "detail": str(e),
                },
            )

    def _options(self, expand: Sequence[str], only: Sequence[str]) -> list:
        options: list = [selectinload(getattr(self.model, name)) for name in expand]
        if only:
            options.append(load_only(*(getattr(self.model, name) for name in only)))
        return options

    # ── Reads ─────────────────────────────────────────────────────────────
    async def find_all(
        self,
        *where: Any,
        order_by: Optional[Sequence[Any]] = None,
        expand: Sequence[str] = (),
        only: Sequence[str] = (),
    ) -> List[ModelT]:
        """All rows matching `where`, sorted, with the named references expanded."""
        if order_by is None:
            order_by = [getattr(self.model, name) for name in self.default_order]
        query = (
            select(self.model)
            .where(*where)
            .order_by(*order_by)
            .options(*self._options(expand, only))
        )
        async with self._session("list") as session:
            result = await session.scalars(query)
            return list(result.all())

    async def find_one(self, *where: Any, expand: Sequence[str] = ()) -> Optional[ModelT]:
        """First row matching `where`, or None."""
        query = select(self.model).where(*where).options(*self._options(expand, ())).limit(1)
        async with self._session("find") as session:
            result = await session.scalars(query)
            return result.first()

    async def find_by_id(self, entity_id: Any, expand: Sequence[str] = ()) -> Optional[ModelT]:
        """The row with this id, or None when it does not exist."""
        pk = parse_id(entity_id)
        query = (
            select(self.model)
            .where(self.model.id == pk)
            .options(*self._options(expand, ()))
        )
        async with self._session("find") as session:
            result = await session.scalars(query)
            return result.one_or_none()

    async def count(self, *where: Any) -> int:
        query = select(func.count()).select_from(self.model).where(*where)
        async with self._session("count") as session:
            result = await session.execute(query)
            return result.scalar_one()

    # ── Writes ────────────────────────────────────────────────────────────
    async def _assign(self, session: AsyncSession, entity: ModelT, values: Mapping[str, Any]) -> None:
        """Copy sanitized form values onto the entity; subclasses map references."""
        for name, value in values.items():
            setattr(entity, name, value)

    def _load_for_update(self) -> list:
        """Loader options needed before `_assign` can replace collections."""
        return []

    async def save(self, values: Mapping[str, Any]) -> ModelT:
        """Create a new row from `values`; the returned entity has its new id."""
        entity = self.model()
        async with self._session("save") as session:
            await self._assign(session, entity, values)
            session.add(entity)
            await session.flush()
        logger.info("Created %s %s", self.resource, entity.id)
        return entity

    async def update_by_id(self, entity_id: Any, values: Mapping[str, Any]) -> Optional[ModelT]:
        """Overwrite the row's fields in place (id preserved); None if missing."""
        pk = parse_id(entity_id)
        query = select(self.model).where(self.model.id == pk).options(*self._load_for_update())
        async with self._session("update") as session:
            entity = (await session.scalars(query)).one_or_none()
            if entity is None:
                return None
            await self._assign(session, entity, values)
            await session.flush()
        logger.info("Updated %s %s", self.resource, pk)
        return entity

    async def _delete_dependent_rows(self, session: AsyncSession, pk: uuid.UUID) -> None:
        """Hook for rows owned by the entity (e.g. association ids)."""

    async def delete_by_id(self, entity_id: Any) -> bool:
        """Delete the row; True if a row was removed."""
        pk = parse_id(entity_id)
        async with self._session("delete") as session:
            await self._delete_dependent_rows(session, pk)
            result = await session.execute(delete(self.model).where(self.model.id == pk))
            removed = result.rowcount > 0
        if removed:
            logger.info("Deleted %s %s", self.resource, pk)
        return removed
