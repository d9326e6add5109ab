"""In-memory implementation of DomainEntityRepository.

Entities are kept by reference in insertion order, so identities are read
live from the stored objects: assigning an id to an entity after saving it
is visible to later lookups.  The store never generates identifiers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from src.domain.criteria import FieldFilter
from src.domain.entities import DomainEntity, has_identity, identity_of
from src.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from src.domain.repositories.base import DomainEntityRepository, E, Fields

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Per-class lists of entity objects shared by repositories."""

    def __init__(self) -> None:
        self._entities: dict[type, list[Any]] = {}

    def entities(self, entity_class: type) -> list[Any]:
        return self._entities.setdefault(entity_class, [])

    def add(self, entity: DomainEntity) -> None:
        stored = self.entities(type(entity))
        if not any(existing is entity for existing in stored):
            stored.append(entity)

    def add_all(self, entities: Iterable[DomainEntity]) -> None:
        for entity in entities:
            self.add(entity)

    def managed(self, entity_class: type) -> list[Any]:
        """Entities of ``entity_class`` or its subclasses, in insertion order."""
        return [
            entity
            for stored_class, entities in self._entities.items()
            if issubclass(stored_class, entity_class)
            for entity in entities
        ]

    def discard(self, entity_class: type, predicate: Callable[[Any], bool]) -> None:
        for stored_class, entities in self._entities.items():
            if issubclass(stored_class, entity_class):
                entities[:] = [entity for entity in entities if not predicate(entity)]

    def clear(self) -> None:
        self._entities.clear()


class InMemoryDomainEntityRepository(DomainEntityRepository[E]):
    supports_generated_ids = False

    def __init__(self, store: InMemoryStore, entity_class: type[E]) -> None:
        super().__init__(entity_class)
        self._store = store

    def _all(self) -> list[E]:
        return self._store.managed(self._entity_class)

    def _matching(self, criteria: FieldFilter) -> list[E]:
        return [entity for entity in self._all() if criteria.matches(entity)]

    def _by_identity(self, ids: Any) -> E | None:
        identity = self._identity_for(ids)
        if not has_identity(identity):
            return None
        matches = self._matching(FieldFilter.for_identity(identity))
        return matches[0] if matches else None

    @staticmethod
    def _paginate(entities: list[E], offset: int, limit: int) -> list[E]:
        return entities[offset : offset + limit] if limit else entities[offset:]

    async def find_all(self, offset: int = 0, limit: int = 0) -> list[E]:
        self._assert_page(offset, limit)
        return self._paginate(self._all(), offset, limit)

    async def find_all_by_fields(self, fields: Fields, offset: int = 0, limit: int = 0) -> list[E]:
        self._assert_page(offset, limit)
        return self._paginate(self._matching(FieldFilter.coerce(fields)), offset, limit)

    async def find(self, ids: Any) -> E:
        entity = self._by_identity(ids)
        if entity is None:
            raise EntityNotFoundError(self._entity_class, self._identity_for(ids))
        return entity

    async def find_by_fields(self, fields: Fields) -> E:
        criteria = FieldFilter.coerce(fields)
        matches = self._matching(criteria)
        if not matches:
            raise EntityNotFoundError(self._entity_class, criteria.as_dict())
        return matches[0]

    async def exists(self, ids: Any) -> bool:
        return self._by_identity(ids) is not None

    async def exists_by_fields(self, fields: Fields) -> bool:
        return bool(self._matching(FieldFilter.coerce(fields)))

    async def save(self, entity: E) -> None:
        self._assert_managed(entity)
        if any(stored is entity for stored in self._all()):
            logger.debug("Updated %s %r", self._entity_class.__name__, identity_of(entity))
            return
        identity = identity_of(entity)
        if has_identity(identity) and self._by_identity(identity) is not None:
            logger.warning("Rejected duplicate %s %r", self._entity_class.__name__, identity)
            raise DuplicateEntityError(self._entity_class, identity)
        self._store.add(entity)
        logger.debug("Saved %s %r", self._entity_class.__name__, identity)

    async def delete(self, entity: E) -> None:
        self._assert_managed(entity)
        identity = identity_of(entity)
        complete = has_identity(identity)
        self._store.discard(
            self._entity_class,
            lambda stored: stored is entity or (complete and identity_of(stored) == identity),
        )
        logger.debug("Deleted %s %r", self._entity_class.__name__, identity)
