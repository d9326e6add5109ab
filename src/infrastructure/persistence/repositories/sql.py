"""SQLAlchemy implementation of DomainEntityRepository.

Entities are mapped directly (imperative mappings, see
src/testing/fixtures/mapping.py), so rows loaded here are the domain
objects themselves.  The repository flushes but never commits: transaction
boundaries belong to whoever owns the session.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Column, ColumnElement, Select, exists, false, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty
from sqlalchemy.orm.exc import FlushError

from src.domain.criteria import UNMATCHED, Criterion, Equals, FieldFilter, OneOf, coerce
from src.domain.entities import has_identity, identity_of, is_empty_value
from src.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidArgumentError,
    InvalidClassError,
    PersistenceError,
)
from src.domain.repositories.base import DomainEntityRepository, E, Fields

logger = logging.getLogger(__name__)

# SQLSTATE 23505 (PostgreSQL); message fragments for SQLite, PostgreSQL and MySQL.
_UNIQUE_VIOLATION_CODES = {"23505"}
_UNIQUE_VIOLATION_MARKERS = ("unique constraint", "duplicate key", "duplicate entry")


def is_duplicate_key_error(exc: Exception) -> bool:
    """True when a flush failed because a unique or primary key is already taken."""
    if isinstance(exc, FlushError):
        # Identity-map conflict with an instance already in the session.
        return "conflicts with persistent instance" in str(exc)
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in _UNIQUE_VIOLATION_CODES:
        return True
    message = str(orig if orig is not None else exc).lower()
    return any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS)


class SqlDomainEntityRepository(DomainEntityRepository[E]):
    supports_generated_ids = True

    def __init__(self, session: AsyncSession, entity_class: type[E]) -> None:
        super().__init__(entity_class)
        mapper = inspect(entity_class, raiseerr=False)
        if not isinstance(mapper, Mapper):
            raise InvalidClassError(entity_class)
        self._session = session
        self._mapper = mapper

    # --- statement building ---

    def _column(self, field: str) -> Column:
        prop = self._mapper.attrs.get(field)
        if isinstance(prop, ColumnProperty):
            return prop.columns[0]
        if isinstance(prop, RelationshipProperty):
            local = list(prop.local_columns)
            if len(local) != 1:
                raise InvalidArgumentError(
                    f"{self._entity_class.__name__}.{field} references a composite key"
                )
            return local[0]
        raise InvalidArgumentError(f"{self._entity_class.__name__} has no field {field!r}")

    @staticmethod
    def _python_type(column: Column) -> type | None:
        try:
            return column.type.python_type
        except NotImplementedError:
            return None

    def _clause(self, criterion: Criterion) -> ColumnElement[bool]:
        column = self._column(criterion.field)
        if isinstance(criterion, Equals) and criterion.value is None:
            return column.is_(None)
        target_type = self._python_type(column)
        if isinstance(criterion, OneOf):
            values = [coerce(value, target_type) for value in criterion.candidates()]
            values = [value for value in values if value is not UNMATCHED]
            return column.in_(values) if values else false()
        value = criterion.value if isinstance(criterion, Equals) else criterion.identifier
        if is_empty_value(value):
            return false()
        value = coerce(value, target_type)
        return false() if value is UNMATCHED else column == value

    def _where(self, criteria: FieldFilter) -> list[ColumnElement[bool]]:
        return [self._clause(criterion) for criterion in criteria.criteria]

    def _select(self) -> Select:
        return select(self._entity_class).order_by(*self._mapper.primary_key)

    @staticmethod
    def _paginate(stmt: Select, offset: int, limit: int) -> Select:
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return stmt

    async def _first(self, criteria: FieldFilter) -> E | None:
        stmt = self._select().where(*self._where(criteria)).limit(1)
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def _exists(self, criteria: FieldFilter) -> bool:
        # Anchored to the table: a filter compiled to false() alone has no FROM.
        subquery = exists().select_from(self._mapper.local_table).where(*self._where(criteria))
        stmt = select(subquery)
        return bool(await self._session.scalar(stmt))

    # --- contract ---

    async def find_all(self, offset: int = 0, limit: int = 0) -> list[E]:
        self._assert_page(offset, limit)
        result = await self._session.execute(self._paginate(self._select(), offset, limit))
        return list(result.scalars())

    async def find_all_by_fields(self, fields: Fields, offset: int = 0, limit: int = 0) -> list[E]:
        self._assert_page(offset, limit)
        criteria = FieldFilter.coerce(fields)
        stmt = self._paginate(self._select().where(*self._where(criteria)), offset, limit)
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def find(self, ids: Any) -> E:
        identity = self._identity_for(ids)
        entity = await self._first(FieldFilter.for_identity(identity)) if has_identity(identity) else None
        if entity is None:
            raise EntityNotFoundError(self._entity_class, identity)
        return entity

    async def find_by_fields(self, fields: Fields) -> E:
        criteria = FieldFilter.coerce(fields)
        entity = await self._first(criteria)
        if entity is None:
            raise EntityNotFoundError(self._entity_class, criteria.as_dict())
        return entity

    async def exists(self, ids: Any) -> bool:
        identity = self._identity_for(ids)
        if not has_identity(identity):
            return False
        return await self._exists(FieldFilter.for_identity(identity))

    async def exists_by_fields(self, fields: Fields) -> bool:
        return await self._exists(FieldFilter.coerce(fields))

    async def save(self, entity: E) -> None:
        self._assert_managed(entity)
        identity = identity_of(entity)
        state = inspect(entity)
        if state.transient:
            if has_identity(identity) and await self._exists(FieldFilter.for_identity(identity)):
                logger.warning("Rejected duplicate %s %r", self._entity_class.__name__, identity)
                raise DuplicateEntityError(self._entity_class, identity)
            self._session.add(entity)
        elif state.detached:
            await self._session.merge(entity)
        try:
            await self._session.flush()
        except (IntegrityError, FlushError) as exc:
            await self._session.rollback()
            logger.warning("Flush rejected %s %r: %s", self._entity_class.__name__, identity, exc)
            if is_duplicate_key_error(exc):
                raise DuplicateEntityError(self._entity_class, identity) from exc
            raise PersistenceError(self._entity_class, identity, str(exc)) from exc
        logger.debug("Saved %s %r", self._entity_class.__name__, identity_of(entity))

    async def delete(self, entity: E) -> None:
        self._assert_managed(entity)
        state = inspect(entity)
        if state.pending:
            self._session.expunge(entity)
            return
        target: E | None = entity
        if not state.persistent:
            identity = identity_of(entity)
            target = (
                await self._first(FieldFilter.for_identity(identity))
                if has_identity(identity)
                else None
            )
        if target is None:
            logger.debug("Nothing to delete for %s %r", self._entity_class.__name__, identity_of(entity))
            return
        await self._session.delete(target)
        await self._session.flush()
        logger.debug("Deleted %s %r", self._entity_class.__name__, identity_of(entity))
