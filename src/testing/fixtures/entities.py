"""Fixture entities covering every identity shape a repository must handle.

  ScalarEntity           generated id plus one field of each scalar kind
  PrimitiveEntity        caller-assigned id
  CompositeEntity        identity made of two fields
  DerivedEntity          identity is the referenced ScalarEntity
  DerivedCompositeEntity identity is a referenced PrimitiveEntity plus an int
  ParentEntity           referenced (non-identity) by ChildEntity
  ChildEntity            holds a ParentEntity reference

samples() returns fresh entities on every call.  Referenced entities use ids
that no other sample uses, so any combination of samples can be stored at
once.  field_sets() returns field mappings that identify exactly one entity,
even when stored next to every sample.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from src.domain.entities import DomainEntity
from src.domain.identifiers import DomainId


class FixtureId(DomainId):
    """Identifier type used by every fixture entity."""


@dataclass
class ScalarEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: FixtureId = field(default_factory=FixtureId)
    str_field: str | None = None
    int_field: int = 0
    float_field: float | None = None
    bool_field: bool = False

    @classmethod
    def samples(cls) -> list[ScalarEntity]:
        return [
            cls(int_field=0, bool_field=True),
            cls(str_field="sample", int_field=1, float_field=-1.5, bool_field=False),
        ]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [
            {"int_field": 100, "bool_field": True},
            {"str_field": "fields", "int_field": 101, "bool_field": False},
            {"float_field": 1.25, "int_field": 102, "bool_field": True},
        ]


@dataclass
class PrimitiveEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: FixtureId

    @classmethod
    def samples(cls) -> list[PrimitiveEntity]:
        return [cls(FixtureId("primitive-1")), cls(FixtureId("primitive-2"))]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [{"id": FixtureId("primitive-fields")}]


@dataclass
class CompositeEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("id_a", "id_b")

    id_a: FixtureId
    id_b: str

    @classmethod
    def samples(cls) -> list[CompositeEntity]:
        return [
            cls(FixtureId("composite-1"), "a"),
            cls(FixtureId("composite-1"), "b"),
            cls(FixtureId("composite-2"), "a"),
        ]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [
            {"id_a": FixtureId("composite-fields"), "id_b": "fields"},
            {"id_a": FixtureId("composite-1"), "id_b": "fields"},
        ]


@dataclass
class DerivedEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("entity",)

    entity: ScalarEntity

    @classmethod
    def samples(cls) -> list[DerivedEntity]:
        return [
            cls(ScalarEntity(int_field=10, bool_field=True)),
            cls(ScalarEntity(str_field="derived", int_field=11, bool_field=False)),
        ]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [{"entity": ScalarEntity(id=FixtureId("9001"), int_field=12, bool_field=False)}]


@dataclass
class DerivedCompositeEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("entity", "id")

    entity: PrimitiveEntity
    id: int

    @classmethod
    def samples(cls) -> list[DerivedCompositeEntity]:
        return [
            cls(PrimitiveEntity(FixtureId("derived-composite-1")), 1),
            cls(PrimitiveEntity(FixtureId("derived-composite-2")), 2),
        ]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [
            {"entity": PrimitiveEntity(FixtureId("derived-composite-fields")), "id": 1},
        ]


@dataclass
class ParentEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: FixtureId
    name: str = ""

    @classmethod
    def samples(cls) -> list[ParentEntity]:
        return [cls(FixtureId("parent-1"), "first"), cls(FixtureId("parent-2"), "second")]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [
            {"id": FixtureId("parent-fields")},
            {"id": FixtureId("parent-fields"), "name": "fields"},
        ]


@dataclass
class ChildEntity(DomainEntity):
    identity_fields: ClassVar[tuple[str, ...]] = ("id",)

    id: FixtureId
    parent: ParentEntity

    @classmethod
    def samples(cls) -> list[ChildEntity]:
        return [
            cls(FixtureId("child-1"), ParentEntity(FixtureId("child-parent-1"), "first")),
            cls(FixtureId("child-2"), ParentEntity(FixtureId("child-parent-2"), "second")),
        ]

    @classmethod
    def field_sets(cls) -> list[dict[str, Any]]:
        return [
            {
                "id": FixtureId("child-fields"),
                "parent": ParentEntity(FixtureId("child-fields-parent"), "fields"),
            },
        ]


ENTITY_TYPES: tuple[type[DomainEntity], ...] = (
    ScalarEntity,
    PrimitiveEntity,
    CompositeEntity,
    DerivedEntity,
    DerivedCompositeEntity,
    ParentEntity,
    ChildEntity,
)
