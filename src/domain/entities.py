"""Domain entity base and identity helpers.

An entity names the fields that make up its identity in ``identity_fields``:
a single field for a simple id, several for a composite id, and a field
holding another entity for an identity derived from that association.
Entities are persistence-ignorant; backends map them without the entity
classes inheriting anything ORM specific.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from .exceptions import InvalidArgumentError
from .identifiers import DomainId

E = TypeVar("E", bound="DomainEntity")


class DomainEntity:
    """Base for entities handled by a DomainEntityRepository."""

    identity_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def create(cls: type[E], **fields: Any) -> E:
        """Named constructor used by fixtures and factories."""
        return cls(**fields)


def is_empty_value(value: Any) -> bool:
    """True for values that cannot identify anything (None or an empty DomainId)."""
    if value is None:
        return True
    return isinstance(value, DomainId) and value.is_empty()


def reference_value(entity: DomainEntity) -> Any:
    """Return the single identity value of an entity used as a reference.

    Raises InvalidArgumentError for entities with a composite identity,
    which cannot stand in for a single field.
    """
    identity = identity_of(entity)
    if len(identity) != 1:
        raise InvalidArgumentError(
            f"{type(entity).__name__} has a composite identity and cannot be referenced "
            "by a single field"
        )
    (value,) = identity.values()
    return value


def identity_of(entity: DomainEntity) -> dict[str, Any]:
    """Return the identity of ``entity`` as field name -> primitive value.

    Entity-typed identity fields are resolved to the referenced entity's
    own identity value, recursively.
    """
    identity: dict[str, Any] = {}
    for field in type(entity).identity_fields:
        value = getattr(entity, field)
        if isinstance(value, DomainEntity):
            value = reference_value(value)
        identity[field] = value
    return identity


def has_identity(identity: Mapping[str, Any]) -> bool:
    """True when every identity component is set."""
    return bool(identity) and not any(is_empty_value(value) for value in identity.values())
