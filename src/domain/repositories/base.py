"""Generic domain entity repository contract.

DomainEntityRepository[E] is the single abstraction every persistence
backend implements.  Concrete implementations live in
src/infrastructure/persistence/repositories/ and are exercised by the
shared test case in src/testing/case.py.

Design notes:
  - All methods are async to accommodate async database drivers (aiosqlite /
    asyncpg through SQLAlchemy async).
  - E is the domain entity type; backends map it without wrapping it.
  - Identities are passed either as a mapping of identity field -> value or,
    for single-field identities, as the bare value.  Entity-typed values are
    reduced to the referenced entity's identity.
  - Listings are paginated with (offset, limit); limit == 0 means no limit.
  - find*/exists* differ only in how a miss is reported: EntityNotFoundError
    versus False.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar, Union

from src.domain.criteria import FieldFilter
from src.domain.entities import DomainEntity, reference_value
from src.domain.exceptions import InvalidArgumentError, InvalidClassError

E = TypeVar("E", bound=DomainEntity)

Fields = Union[FieldFilter, Mapping[str, Any]]


class DomainEntityRepository(ABC, Generic[E]):
    """Abstract find/exists/save/delete interface for one entity class."""

    # Whether save() assigns identifiers to entities whose identity is empty.
    supports_generated_ids: ClassVar[bool] = False

    def __init__(self, entity_class: type[E]) -> None:
        if not issubclass(entity_class, DomainEntity) or not entity_class.identity_fields:
            raise InvalidClassError(entity_class)
        self._entity_class = entity_class

    @property
    def entity_class(self) -> type[E]:
        return self._entity_class

    @abstractmethod
    async def find_all(self, offset: int = 0, limit: int = 0) -> list[E]:
        """Return a page of all entities in a stable order."""

    @abstractmethod
    async def find_all_by_fields(self, fields: Fields, offset: int = 0, limit: int = 0) -> list[E]:
        """Return a page of the entities matching every field criterion."""

    @abstractmethod
    async def find(self, ids: Any) -> E:
        """Return the entity with the given identity.  Raises EntityNotFoundError."""

    @abstractmethod
    async def find_by_fields(self, fields: Fields) -> E:
        """Return the first entity matching the fields.  Raises EntityNotFoundError."""

    @abstractmethod
    async def exists(self, ids: Any) -> bool:
        """Return whether an entity with the given identity is stored."""

    @abstractmethod
    async def exists_by_fields(self, fields: Fields) -> bool:
        """Return whether any entity matches the fields."""

    @abstractmethod
    async def save(self, entity: E) -> None:
        """Insert or update the entity.

        Raises DuplicateEntityError when a different entity already uses the
        identity, and InvalidClassError for entities of another class.
        """

    @abstractmethod
    async def delete(self, entity: E) -> None:
        """Remove the entity.  Raises InvalidClassError for entities of another class."""

    def _identity_for(self, ids: Any) -> dict[str, Any]:
        fields = self._entity_class.identity_fields
        if isinstance(ids, Mapping):
            if set(ids) != set(fields):
                raise InvalidArgumentError(
                    f"{self._entity_class.__name__} is identified by {list(fields)}, "
                    f"got {sorted(ids)}"
                )
            identity = {field: ids[field] for field in fields}
        elif len(fields) == 1:
            identity = {fields[0]: ids}
        else:
            raise InvalidArgumentError(
                f"{self._entity_class.__name__} has a composite identity; pass a mapping of {list(fields)}"
            )
        return {
            field: reference_value(value) if isinstance(value, DomainEntity) else value
            for field, value in identity.items()
        }

    def _assert_managed(self, entity: object) -> None:
        if not isinstance(entity, self._entity_class):
            raise InvalidClassError(type(entity), self._entity_class)

    @staticmethod
    def _assert_page(offset: int, limit: int) -> None:
        if offset < 0 or limit < 0:
            raise InvalidArgumentError(f"offset and limit must be >= 0, got {offset}, {limit}")
