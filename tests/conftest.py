"""Shared fixtures: an ORM harness on in-memory SQLite and an in-memory store."""

import pytest

# Keep pytest's assertion introspection for the shared repository test case.
pytest.register_assert_rewrite("src.testing.case")

from src.infrastructure.database import Settings  # noqa: E402
from src.infrastructure.persistence.repositories import InMemoryStore  # noqa: E402
from src.testing.harness import EntityManagerHarness  # noqa: E402


@pytest.fixture
async def harness():
    harness = EntityManagerHarness(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    await harness.init_em()
    await harness.prepare_em()
    yield harness
    await harness.destroy_em()


@pytest.fixture
def memory_store():
    return InMemoryStore()
