"""Storage layer for Local Links Manager."""

from locallinks.storage.database import Database, get_db
from locallinks.storage.repositories import (
    AuthorityRepository,
    InteractionRepository,
    LinkRepository,
    ServiceInteractionRepository,
    ServiceRepository,
)

__all__ = [
    "Database",
    "get_db",
    "AuthorityRepository",
    "ServiceRepository",
    "InteractionRepository",
    "ServiceInteractionRepository",
    "LinkRepository",
]
