"""SQLAlchemy column types for domain identifiers.

DomainIdType stores any identifier as text.  IntegerDomainIdType stores
numeric identifiers and is meant for backend-generated (autoincrement)
primary keys: empty or non-numeric identifiers bind to NULL and are cleared
before INSERT by clear_generated_ids() so the database assigns one.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapper
from sqlalchemy.types import TypeDecorator

from src.domain.identifiers import DomainId


class DomainIdType(TypeDecorator):
    """Persist a DomainId subclass as a string column."""

    impl = String
    cache_ok = True

    def __init__(self, id_class: type[DomainId] = DomainId, length: int = 255) -> None:
        super().__init__(length)
        self.id_class = id_class

    @property
    def python_type(self) -> type[DomainId]:
        return self.id_class

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        if not isinstance(value, DomainId):
            value = self.id_class(value)
        return value.value

    def process_result_value(self, value: Any, dialect: Dialect) -> DomainId | None:
        return None if value is None else self.id_class(value)

    def process_literal_param(self, value: Any, dialect: Dialect) -> str:
        bound = self.process_bind_param(value, dialect)
        return "NULL" if bound is None else repr(bound)


class IntegerDomainIdType(DomainIdType):
    """Persist a numeric DomainId subclass as an integer column."""

    impl = Integer
    cache_ok = True

    def __init__(self, id_class: type[DomainId] = DomainId) -> None:
        TypeDecorator.__init__(self)
        self.id_class = id_class

    @staticmethod
    def to_integer(value: Any) -> int | None:
        if isinstance(value, DomainId):
            value = value.value
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.removeprefix("-").isdecimal():
            return int(value)
        return None

    def process_bind_param(self, value: Any, dialect: Dialect) -> int | None:
        return self.to_integer(value)

    def process_literal_param(self, value: Any, dialect: Dialect) -> str:
        bound = self.to_integer(value)
        return "NULL" if bound is None else str(bound)


def clear_generated_ids(mapper: Mapper, connection: Any, target: Any) -> None:
    """``before_insert`` listener: drop identifiers the database must generate.

    Register on a mapped class with
    ``event.listen(cls, "before_insert", clear_generated_ids)``.
    """
    for column in mapper.primary_key:
        if not isinstance(column.type, IntegerDomainIdType):
            continue
        key = mapper.get_property_by_column(column).key
        if IntegerDomainIdType.to_integer(getattr(target, key, None)) is None:
            setattr(target, key, None)
