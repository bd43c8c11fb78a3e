"""Provider repositories (storage collaborators of the scoring engine)."""

from .base import ProviderRepository
from .memory import InMemoryProviderRepository
from .sql import SqlProviderRepository

__all__ = [
    "ProviderRepository",
    "InMemoryProviderRepository",
    "SqlProviderRepository",
]
