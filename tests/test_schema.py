"""Storage-level constraints of the links schema."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

pytestmark = pytest.mark.unit

from locallinks.models.authority import Authority
from locallinks.models.enums import LinkStatus, Tier
from locallinks.models.link import Link
from locallinks.models.service import Interaction, Service
from locallinks.models.service_interaction import ServiceInteraction
from locallinks.storage.repositories import AuthorityRepository, ServiceRepository


@pytest.fixture
def rows(db_session):
    """One authority, service, interaction and their service interaction, inserted directly."""
    authority = Authority(name="Angus", slug="angus", gss="S12000041", snac="00QB", tier=Tier.UNITARY)
    service = Service(lgsl_code=1, label="Waste", slug="waste")
    interaction = Interaction(lgil_code=8, label="Find out", slug="find-out")
    db_session.add_all([authority, service, interaction])
    db_session.flush()
    service_interaction = ServiceInteraction(service_id=service.id, interaction_id=interaction.id)
    db_session.add(service_interaction)
    db_session.flush()
    return authority, service, interaction, service_interaction


def test_link_defaults(db_session, rows):
    """A bare link has empty diagnostics and no status."""
    authority, _, _, service_interaction = rows
    link = Link(authority_id=authority.id, service_interaction_id=service_interaction.id)
    db_session.add(link)
    db_session.commit()

    db_session.refresh(link)
    assert link.url is None
    assert link.status is None
    assert link.analytics == 0
    assert link.link_errors == []
    assert link.link_warnings == []


def test_status_round_trips_as_enum(db_session, rows):
    authority, _, _, service_interaction = rows
    link = Link(
        authority_id=authority.id,
        service_interaction_id=service_interaction.id,
        status=LinkStatus.BROKEN,
    )
    db_session.add(link)
    db_session.commit()
    db_session.expire_all()

    stored = db_session.scalar(select(Link))
    assert stored.status is LinkStatus.BROKEN


def test_link_pair_is_unique(db_session, rows):
    """Two links for the same authority and service interaction are rejected by the database."""
    authority, _, _, service_interaction = rows
    db_session.add(Link(authority_id=authority.id, service_interaction_id=service_interaction.id))
    db_session.flush()

    db_session.add(Link(authority_id=authority.id, service_interaction_id=service_interaction.id))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_service_interaction_pair_is_unique(db_session, rows):
    _, service, interaction, _ = rows
    db_session.add(ServiceInteraction(service_id=service.id, interaction_id=interaction.id))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_authority_codes_are_unique(db_session, rows):
    db_session.add(
        Authority(name="Other", slug="other", gss="S12000041", snac="00XX", tier=Tier.COUNTY)
    )
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_link_requires_existing_authority(db_session, rows):
    _, _, _, service_interaction = rows
    db_session.add(Link(authority_id=9999, service_interaction_id=service_interaction.id))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_deleting_authority_deletes_its_links(db_session, rows):
    authority, _, _, service_interaction = rows
    db_session.add(Link(authority_id=authority.id, service_interaction_id=service_interaction.id))
    db_session.commit()

    assert AuthorityRepository(db_session).delete(authority.id)
    db_session.commit()

    assert db_session.scalars(select(Link)).all() == []


def test_deleting_referenced_service_is_rejected(db_session, rows):
    """A service still paired with an interaction cannot be deleted."""
    _, service, _, _ = rows
    db_session.commit()

    with pytest.raises(IntegrityError):
        ServiceRepository(db_session).delete(service.id)
    db_session.rollback()


def test_deleting_parent_authority_detaches_children(db_session, rows):
    county, _, _, _ = rows
    district = Authority(
        name="District",
        slug="district",
        gss="E07000001",
        snac="00AA",
        tier=Tier.DISTRICT,
        parent_authority_id=county.id,
    )
    db_session.add(district)
    db_session.commit()
    district_id = district.id

    AuthorityRepository(db_session).delete(county.id)
    db_session.commit()
    db_session.expire_all()

    assert db_session.get(Authority, district_id).parent_authority_id is None
