"""Domain repository interfaces.

The abstraction is defined here with abc.ABC and @abstractmethod.
Concrete implementations live in src/infrastructure/persistence/ and are
wired at the application boundary.

Import from this package rather than individual modules to avoid coupling
callers to specific repository module paths.
"""

from .base import DomainEntityRepository, Fields

__all__ = [
    "DomainEntityRepository",
    "Fields",
]
