"""Domain identifier value object.

A DomainId wraps a primitive identifier (stored as a string) and can be
empty, which is how an entity signals that its identity has not been
assigned yet (e.g. before a backend generates one on save).
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, field_validator


class DomainId(BaseModel):
    """Opaque identifier; equality is by class and value."""

    model_config = ConfigDict(frozen=True)

    value: str | None = None

    def __init__(self, value: str | int | DomainId | None = None, **data: Any) -> None:
        super().__init__(value=value, **data)

    @field_validator("value", mode="before")
    @classmethod
    def _normalise(cls, value: Any) -> str | None:
        if isinstance(value, DomainId):
            return value.value
        if isinstance(value, bool):
            raise ValueError("A boolean is not a valid identifier")
        if isinstance(value, int):
            return str(value)
        if value == "":
            return None
        return value

    @classmethod
    def generate(cls) -> DomainId:
        """Return a new, non-empty identifier of this class."""
        return cls(uuid4().hex)

    def is_empty(self) -> bool:
        return self.value is None

    def to_string(self) -> str:
        return self.value or ""

    def __str__(self) -> str:
        return self.to_string()
