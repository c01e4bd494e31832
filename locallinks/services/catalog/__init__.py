"""Catalog service module with validation components."""

from locallinks.services.catalog.validation import CatalogValidator, slugify

__all__ = ["CatalogValidator", "slugify"]
