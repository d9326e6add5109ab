"""Typed field-filter criteria.

A FieldFilter is a conjunction of per-field criteria (AND across fields);
OneOf is a disjunction within a single field. Plain ``{field: value}``
mappings are converted with FieldFilter.from_mapping, which picks the
criterion variant from the value's kind.

Matching rules shared by every backend:
  - candidate values are coerced to the stored value's type, so ``1`` matches
    ``DomainId("1")`` and ``"1"`` matches ``1``; values that cannot be coerced
    never match, and lossy conversions (``1.5`` to int, ``"false"`` to
    bool) count as impossible;
  - an empty DomainId never matches;
  - OneOf follows SQL ``IN`` semantics: ``None`` members are ignored, so
    ``[None, "foo"]`` does not match a field that is ``None``;
  - Equals(field, None) matches only fields that are ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from .entities import DomainEntity, has_identity, identity_of, is_empty_value, reference_value
from .exceptions import EmptyIdentifierError, InvalidArgumentError
from .identifiers import DomainId

# Sentinel returned by coerce() for values that cannot represent the target type.
UNMATCHED: Any = object()

_COLLECTION_TYPES = (list, tuple, set, frozenset)

_BOOLEANS = {False: False, True: True, "0": False, "1": True}


def _to_bool(value: Any) -> Any:
    try:
        return _BOOLEANS.get(value, UNMATCHED)
    except TypeError:
        return UNMATCHED


def coerce(value: Any, target_type: type | None) -> Any:
    """Convert ``value`` to ``target_type`` for comparison, or return UNMATCHED.

    Conversions must be exact: ``1.5`` is not an int and ``"false"`` is not
    a bool (only bools, 0/1 and "0"/"1" are).
    """
    if value is None or target_type is None or isinstance(value, target_type):
        return value
    if isinstance(value, DomainId) and not issubclass(target_type, DomainId):
        value = value.value
    if issubclass(target_type, bool):
        return _to_bool(value)
    try:
        converted = target_type(value)
    except (TypeError, ValueError):
        return UNMATCHED
    numeric = issubclass(target_type, (int, float)) and isinstance(value, (int, float))
    if numeric and converted != value:
        return UNMATCHED
    return converted


@dataclass(frozen=True)
class Equals:
    """field == value; ``None`` means the field must be unset."""

    field: str
    value: Any


@dataclass(frozen=True)
class IdentifiedBy:
    """field holds (or references an entity with) the given identifier."""

    field: str
    identifier: Any


@dataclass(frozen=True)
class OneOf:
    """field equals any of the given values."""

    field: str
    values: tuple[Any, ...]

    def candidates(self) -> tuple[Any, ...]:
        """Values that can match at all (no None, no empty ids)."""
        return tuple(value for value in self.values if not is_empty_value(value))


Criterion = Union[Equals, IdentifiedBy, OneOf]


def _matches_value(stored: Any, candidate: Any) -> bool:
    if stored is None or is_empty_value(candidate):
        return False
    if isinstance(stored, DomainEntity):
        stored = reference_value(stored)
        if is_empty_value(stored):
            return False
    candidate = coerce(candidate, type(stored))
    return candidate is not UNMATCHED and candidate == stored


def _entity_reference(field: str, entity: DomainEntity) -> Any:
    identity = identity_of(entity)
    if not has_identity(identity):
        raise EmptyIdentifierError(field, entity)
    return reference_value(entity)


def _criterion_for(field: str, value: Any) -> Criterion:
    if isinstance(value, DomainEntity):
        return IdentifiedBy(field, _entity_reference(field, value))
    if isinstance(value, DomainId):
        return IdentifiedBy(field, value)
    if isinstance(value, _COLLECTION_TYPES):
        return OneOf(
            field,
            tuple(
                _entity_reference(field, member) if isinstance(member, DomainEntity) else member
                for member in value
            ),
        )
    return Equals(field, value)


class FieldFilter:
    """Conjunction of criteria; must name at least one field."""

    __slots__ = ("criteria",)

    def __init__(self, criteria: Iterable[Criterion]) -> None:
        self.criteria: tuple[Criterion, ...] = tuple(criteria)
        if not self.criteria:
            raise InvalidArgumentError("Filtering requires at least one field")

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any]) -> FieldFilter:
        return cls(_criterion_for(field, value) for field, value in fields.items())

    @classmethod
    def coerce(cls, fields: FieldFilter | Mapping[str, Any]) -> FieldFilter:
        if isinstance(fields, FieldFilter):
            return fields
        return cls.from_mapping(fields)

    @classmethod
    def for_identity(cls, identity: Mapping[str, Any]) -> FieldFilter:
        """Filter matching an identity as returned by identity_of()."""
        return cls(IdentifiedBy(field, value) for field, value in identity.items())

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(criterion.field for criterion in self.criteria)

    def as_dict(self) -> dict[str, Any]:
        """Readable form used in error messages."""
        described: dict[str, Any] = {}
        for criterion in self.criteria:
            if isinstance(criterion, Equals):
                described[criterion.field] = criterion.value
            elif isinstance(criterion, IdentifiedBy):
                described[criterion.field] = criterion.identifier
            else:
                described[criterion.field] = list(criterion.values)
        return described

    def matches(self, entity: DomainEntity) -> bool:
        """Evaluate the filter against an in-memory entity."""
        for criterion in self.criteria:
            try:
                stored = getattr(entity, criterion.field)
            except AttributeError as exc:
                raise InvalidArgumentError(
                    f"{type(entity).__name__} has no field {criterion.field!r}"
                ) from exc
            if isinstance(criterion, Equals):
                matched = (
                    stored is None
                    if criterion.value is None
                    else _matches_value(stored, criterion.value)
                )
            elif isinstance(criterion, IdentifiedBy):
                matched = _matches_value(stored, criterion.identifier)
            else:
                matched = any(_matches_value(stored, value) for value in criterion.candidates())
            if not matched:
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldFilter):
            return NotImplemented
        return self.criteria == other.criteria

    # Criterion values may be unhashable (lists, dicts).
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FieldFilter({list(self.criteria)!r})"
