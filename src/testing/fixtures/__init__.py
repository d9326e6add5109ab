"""Fixture entities shared by repository test suites.

The SQLAlchemy mappings live in .mapping and are imported on demand by
EntityManagerHarness, so the in-memory backend can use these entities
without touching the ORM.
"""

from .entities import (
    ENTITY_TYPES,
    ChildEntity,
    CompositeEntity,
    DerivedCompositeEntity,
    DerivedEntity,
    FixtureId,
    ParentEntity,
    PrimitiveEntity,
    ScalarEntity,
)

__all__ = [
    "ENTITY_TYPES",
    "FixtureId",
    "ScalarEntity",
    "PrimitiveEntity",
    "CompositeEntity",
    "DerivedEntity",
    "DerivedCompositeEntity",
    "ParentEntity",
    "ChildEntity",
]
