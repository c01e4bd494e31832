"""Service layer for business logic and validation."""

from locallinks.services.catalog_service import CatalogService
from locallinks.services.link_service import LinkService

__all__ = ["CatalogService", "LinkService"]
