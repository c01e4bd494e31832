"""Shared pytest fixtures and test utilities for Local Links Manager tests."""

import itertools
import os
import tempfile
from typing import Any, Generator

import pytest

from locallinks.models.authority import Authority
from locallinks.models.link import Link
from locallinks.models.service import Interaction, Service
from locallinks.models.service_interaction import ServiceInteraction
from locallinks.services.catalog_service import CatalogService
from locallinks.services.link_service import LinkService
from locallinks.storage.database import Database, reset_db


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    reset_db()

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    database.drop_tables()
    database.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def link_service(db_session):
    """Create a link service instance."""
    return LinkService(db_session)


@pytest.fixture
def catalog_service(db_session):
    """Create a catalog service instance."""
    return CatalogService(db_session)


class Factory:
    """Builds catalog rows and links with unique codes, slugs and URLs."""

    def __init__(self, session):
        self.session = session
        self.catalog = CatalogService(session)
        self.links = LinkService(session)
        self._sequence = itertools.count(1)

    def _next(self) -> int:
        return next(self._sequence)

    def authority(self, **overrides: Any) -> Authority:
        n = self._next()
        fields = {
            "name": f"Authority {n}",
            "gss": f"S{n:09d}",
            "snac": f"00AB{n}",
            "tier": "unitary",
            "homepage_url": None,
        }
        fields.update(overrides)
        return self.catalog.create_authority(**fields)

    def service(self, **overrides: Any) -> Service:
        n = self._next()
        fields = {"lgsl_code": n, "label": f"Service {n}", "enabled": True, "tiers": "all"}
        fields.update(overrides)
        return self.catalog.create_service(**fields)

    def interaction(self, **overrides: Any) -> Interaction:
        n = self._next()
        fields = {"lgil_code": n, "label": f"Interaction {n}"}
        fields.update(overrides)
        return self.catalog.create_interaction(**fields)

    def service_interaction(
        self, service: Service | None = None, interaction: Interaction | None = None, **overrides: Any
    ) -> ServiceInteraction:
        service = service or self.service()
        interaction = interaction or self.interaction()
        return self.catalog.create_service_interaction(service.id, interaction.id, **overrides)

    def link(
        self,
        authority: Authority | None = None,
        service_interaction: ServiceInteraction | None = None,
        **fields: Any,
    ) -> Link:
        authority = authority or self.authority()
        service_interaction = service_interaction or self.service_interaction()
        if "url" not in fields:
            fields["url"] = f"http://www.example.com/{self._next()}"
        return self.links.create_link(authority.id, service_interaction.id, **fields)


@pytest.fixture
def factory(db_session) -> Factory:
    """Provide a Factory bound to the test session."""
    return Factory(db_session)
