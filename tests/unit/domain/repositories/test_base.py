"""Tests for src/domain/repositories/base.py."""

import pytest

from src.domain.exceptions import InvalidArgumentError, InvalidClassError
from src.domain.repositories.base import DomainEntityRepository
from src.testing.fixtures import (
    CompositeEntity,
    DerivedEntity,
    FixtureId,
    PrimitiveEntity,
    ScalarEntity,
)


class _Full(DomainEntityRepository):
    async def find_all(self, offset=0, limit=0): return []
    async def find_all_by_fields(self, fields, offset=0, limit=0): return []
    async def find(self, ids): return None
    async def find_by_fields(self, fields): return None
    async def exists(self, ids): return False
    async def exists_by_fields(self, fields): return False
    async def save(self, entity): return None
    async def delete(self, entity): return None


def test_repository_cannot_be_instantiated_directly():
    with pytest.raises(TypeError):
        DomainEntityRepository(PrimitiveEntity)  # type: ignore[abstract]


def test_repository_concrete_subclass_must_implement_all_methods():
    class _Partial(DomainEntityRepository):
        async def find(self, ids): return None
        # missing the rest of the contract

    with pytest.raises(TypeError):
        _Partial(PrimitiveEntity)  # type: ignore[abstract]


def test_repository_full_concrete_subclass_instantiates():
    assert _Full(PrimitiveEntity).entity_class is PrimitiveEntity


def test_repository_rejects_non_entity_class():
    with pytest.raises(InvalidClassError):
        _Full(dict)


def test_generated_ids_are_off_by_default():
    assert _Full.supports_generated_ids is False


# --- identity arguments ---

def test_identity_for_bare_value():
    assert _Full(PrimitiveEntity)._identity_for(FixtureId("1")) == {"id": FixtureId("1")}


def test_identity_for_mapping():
    ids = {"id_b": "b", "id_a": FixtureId("1")}
    assert _Full(CompositeEntity)._identity_for(ids) == {"id_a": FixtureId("1"), "id_b": "b"}


def test_identity_for_reduces_entities_to_their_identity():
    scalar = ScalarEntity(id=FixtureId("7"))
    assert _Full(DerivedEntity)._identity_for(scalar) == {"entity": FixtureId("7")}


def test_identity_for_composite_requires_mapping():
    with pytest.raises(InvalidArgumentError):
        _Full(CompositeEntity)._identity_for(FixtureId("1"))


def test_identity_for_rejects_wrong_keys():
    with pytest.raises(InvalidArgumentError):
        _Full(CompositeEntity)._identity_for({"id_a": FixtureId("1"), "other": 1})


# --- guards ---

def test_assert_managed_rejects_other_classes():
    with pytest.raises(InvalidClassError):
        _Full(PrimitiveEntity)._assert_managed(ScalarEntity())


def test_assert_page_rejects_negative_values():
    with pytest.raises(InvalidArgumentError):
        DomainEntityRepository._assert_page(0, -1)
    DomainEntityRepository._assert_page(0, 0)
