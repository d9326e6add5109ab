"""Domain error hierarchy.

All errors are raised synchronously to the caller; repositories never retry.
ORM or driver errors are translated into these at the repository boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class DomainError(Exception):
    """Base class for every error raised by the domain layer."""


class EntityNotFoundError(DomainError):
    """No entity matches the requested identity or fields."""

    def __init__(self, entity_class: type, criteria: Mapping[str, Any] | None = None) -> None:
        self.entity_class = entity_class
        self.criteria = dict(criteria or {})
        message = f"{entity_class.__name__} not found"
        if self.criteria:
            message += f": {self.criteria!r}"
        super().__init__(message)


class DuplicateEntityError(DomainError):
    """Another entity already uses the identity being saved."""

    def __init__(self, entity_class: type, identity: Mapping[str, Any]) -> None:
        self.entity_class = entity_class
        self.identity = dict(identity)
        super().__init__(f"{entity_class.__name__} already exists: {self.identity!r}")


class InvalidClassError(DomainError):
    """The entity class is not managed by the repository (or not mapped at all)."""

    def __init__(self, entity_class: type, expected: type | None = None) -> None:
        self.entity_class = entity_class
        self.expected = expected
        message = f"Class {entity_class.__name__} is not managed"
        if expected is not None:
            message += f" by a repository for {expected.__name__}"
        super().__init__(message)


class InvalidArgumentError(DomainError, ValueError):
    """A repository operation was called with unusable arguments."""


class EmptyIdentifierError(InvalidArgumentError):
    """An entity used as a filter value has no identity, so the match is ambiguous."""

    def __init__(self, field: str, entity: object) -> None:
        self.field = field
        self.entity = entity
        super().__init__(
            f"Field {field!r} references a {type(entity).__name__} without an identity"
        )


class PersistenceError(DomainError):
    """The backend rejected a write for a reason other than a duplicate identity."""

    def __init__(self, entity_class: type, identity: Mapping[str, Any], reason: str) -> None:
        self.entity_class = entity_class
        self.identity = dict(identity)
        self.reason = reason
        super().__init__(f"Could not save {entity_class.__name__} {self.identity!r}: {reason}")
