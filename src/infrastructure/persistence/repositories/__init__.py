"""Concrete repository implementations.

Exports the SQLAlchemy and in-memory backends and the get_repositories()
factory for wiring SQL repositories to a session at the application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from .memory import InMemoryDomainEntityRepository, InMemoryStore
from .sql import SqlDomainEntityRepository


@dataclass
class Repositories:
    """SQL repositories bound to a single AsyncSession, one per entity class."""

    session: AsyncSession
    _by_class: dict[type, SqlDomainEntityRepository] = field(default_factory=dict, repr=False)

    def get(self, entity_class: type) -> SqlDomainEntityRepository:
        repository = self._by_class.get(entity_class)
        if repository is None:
            repository = SqlDomainEntityRepository(self.session, entity_class)
            self._by_class[entity_class] = repository
        return repository


def get_repositories(session: AsyncSession) -> Repositories:
    """Construct the repository registry bound to the given session.

        async with AsyncSessionLocal() as session:
            repos = get_repositories(session)
            entity = await repos.get(SomeEntity).find(entity_id)
    """
    return Repositories(session=session)


__all__ = [
    "SqlDomainEntityRepository",
    "InMemoryDomainEntityRepository",
    "InMemoryStore",
    "Repositories",
    "get_repositories",
]
