"""Persistence package.

Exports the identifier column types, every repository implementation and
the DI factory.  Entity mappings are registered separately (see
src/testing/fixtures/mapping.py) so that domain classes stay ORM-free.
"""

from src.infrastructure.persistence.repositories import (
    InMemoryDomainEntityRepository,
    InMemoryStore,
    Repositories,
    SqlDomainEntityRepository,
    get_repositories,
)
from src.infrastructure.persistence.types import (
    DomainIdType,
    IntegerDomainIdType,
    clear_generated_ids,
)

__all__ = [
    "DomainIdType",
    "IntegerDomainIdType",
    "clear_generated_ids",
    "Repositories",
    "SqlDomainEntityRepository",
    "InMemoryDomainEntityRepository",
    "InMemoryStore",
    "get_repositories",
]
