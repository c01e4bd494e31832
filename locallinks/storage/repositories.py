"""Repository pattern implementation for data access layer."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, contains_eager, joinedload

from locallinks.models.authority import Authority
from locallinks.models.enums import LinkStatus, Tier
from locallinks.models.link import Link
from locallinks.models.service import Interaction, Service, ServiceTier
from locallinks.models.service_interaction import ServiceInteraction

BAD_STATUSES = (LinkStatus.BROKEN, LinkStatus.MISSING)

# Tie-breaks for picking the sibling link a new URL inherits its status from.
MATCH_ORDERINGS = {
    "most_recently_checked": (
        Link.link_last_checked.is_(None),
        Link.link_last_checked.desc(),
        Link.id,
    ),
    "first_created": (Link.id,),
}


def _with_catalog(stmt):
    """Eager-load a link's authority, service interaction, service and interaction."""
    return stmt.options(
        joinedload(Link.authority),
        joinedload(Link.service_interaction).joinedload(ServiceInteraction.service),
        joinedload(Link.service_interaction).joinedload(ServiceInteraction.interaction),
    )


class AuthorityRepository:
    """Repository for authority operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, authority: Authority) -> Authority:
        """Create a new authority."""
        self.session.add(authority)
        self.session.flush()
        return authority

    def get_by_id(self, authority_id: int) -> Optional[Authority]:
        """Get authority by ID."""
        return self.session.get(Authority, authority_id)

    def get_by_slug(self, slug: str) -> Optional[Authority]:
        """Get authority by slug."""
        return self.session.scalar(select(Authority).where(Authority.slug == slug))

    def get_by_gss(self, gss: str) -> Optional[Authority]:
        """Get authority by GSS code."""
        return self.session.scalar(select(Authority).where(Authority.gss == gss))

    def get_by_snac(self, snac: str) -> Optional[Authority]:
        """Get authority by SNAC code."""
        return self.session.scalar(select(Authority).where(Authority.snac == snac))

    def list_all(self) -> list[Authority]:
        """Get every authority ordered by name."""
        stmt = select(Authority).order_by(Authority.name, Authority.id)
        return list(self.session.scalars(stmt))

    def set_broken_link_counts(self, counts: dict[int, int]) -> None:
        """Overwrite broken_link_count for all authorities (absent ids get 0)."""
        self.session.execute(update(Authority).values(broken_link_count=0))
        for authority_id, count in counts.items():
            self.session.execute(
                update(Authority)
                .where(Authority.id == authority_id)
                .values(broken_link_count=count)
            )
        self.session.flush()

    def delete(self, authority_id: int) -> bool:
        """Delete an authority by ID; its links go with it via the foreign key."""
        authority = self.get_by_id(authority_id)
        if authority:
            self.session.delete(authority)
            self.session.flush()
            return True
        return False


class ServiceRepository:
    """Repository for service operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, service: Service) -> Service:
        """Create a new service."""
        self.session.add(service)
        self.session.flush()
        return service

    def get_by_id(self, service_id: int) -> Optional[Service]:
        """Get service by ID."""
        return self.session.get(Service, service_id)

    def get_by_slug(self, slug: str) -> Optional[Service]:
        """Get service by slug."""
        return self.session.scalar(select(Service).where(Service.slug == slug))

    def get_by_lgsl_code(self, lgsl_code: int) -> Optional[Service]:
        """Get service by LGSL code."""
        return self.session.scalar(select(Service).where(Service.lgsl_code == lgsl_code))

    def get_by_label(self, label: str) -> Optional[Service]:
        """Get service by label."""
        return self.session.scalar(select(Service).where(Service.label == label))

    def enabled_for_tier(self, tier: Tier) -> list[Service]:
        """Get enabled services that authorities of the given tier provide."""
        stmt = (
            select(Service)
            .join(ServiceTier, ServiceTier.service_id == Service.id)
            .where(ServiceTier.tier == tier, Service.enabled.is_(True))
            .order_by(Service.label)
        )
        return list(self.session.scalars(stmt))

    def set_broken_link_counts(self, counts: dict[int, int]) -> None:
        """Overwrite broken_link_count for all services (absent ids get 0)."""
        self.session.execute(update(Service).values(broken_link_count=0))
        for service_id, count in counts.items():
            self.session.execute(
                update(Service).where(Service.id == service_id).values(broken_link_count=count)
            )
        self.session.flush()

    def delete(self, service_id: int) -> bool:
        """Delete a service by ID."""
        service = self.get_by_id(service_id)
        if service:
            self.session.delete(service)
            self.session.flush()
            return True
        return False


class InteractionRepository:
    """Repository for interaction operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, interaction: Interaction) -> Interaction:
        """Create a new interaction."""
        self.session.add(interaction)
        self.session.flush()
        return interaction

    def get_by_id(self, interaction_id: int) -> Optional[Interaction]:
        """Get interaction by ID."""
        return self.session.get(Interaction, interaction_id)

    def get_by_slug(self, slug: str) -> Optional[Interaction]:
        """Get interaction by slug."""
        return self.session.scalar(select(Interaction).where(Interaction.slug == slug))

    def get_by_lgil_code(self, lgil_code: int) -> Optional[Interaction]:
        """Get interaction by LGIL code."""
        return self.session.scalar(select(Interaction).where(Interaction.lgil_code == lgil_code))

    def get_by_label(self, label: str) -> Optional[Interaction]:
        """Get interaction by label."""
        return self.session.scalar(select(Interaction).where(Interaction.label == label))


class ServiceInteractionRepository:
    """Repository for service interaction operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, service_interaction: ServiceInteraction) -> ServiceInteraction:
        """Create a new service interaction."""
        self.session.add(service_interaction)
        self.session.flush()
        return service_interaction

    def get_by_id(self, service_interaction_id: int) -> Optional[ServiceInteraction]:
        """Get service interaction by ID."""
        return self.session.get(ServiceInteraction, service_interaction_id)

    def get_by_pair(self, service_id: int, interaction_id: int) -> Optional[ServiceInteraction]:
        """Get the service interaction for a service and interaction pair."""
        stmt = select(ServiceInteraction).where(
            ServiceInteraction.service_id == service_id,
            ServiceInteraction.interaction_id == interaction_id,
        )
        return self.session.scalar(stmt)

    def get_by_codes(self, lgsl_code: int, lgil_code: int) -> Optional[ServiceInteraction]:
        """Get the service interaction for an LGSL/LGIL code pair, with both sides loaded."""
        stmt = (
            select(ServiceInteraction)
            .join(ServiceInteraction.service)
            .join(ServiceInteraction.interaction)
            .where(Service.lgsl_code == lgsl_code, Interaction.lgil_code == lgil_code)
            .options(
                contains_eager(ServiceInteraction.service),
                contains_eager(ServiceInteraction.interaction),
            )
        )
        return self.session.scalar(stmt)

    def list_for_service(self, service_id: int) -> list[ServiceInteraction]:
        """Get a service's interactions ordered by LGIL code."""
        stmt = (
            select(ServiceInteraction)
            .join(ServiceInteraction.interaction)
            .where(ServiceInteraction.service_id == service_id)
            .options(contains_eager(ServiceInteraction.interaction))
            .order_by(Interaction.lgil_code)
        )
        return list(self.session.scalars(stmt))


class LinkRepository:
    """Repository for link operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, link: Link) -> Link:
        """Create a new link."""
        self.session.add(link)
        self.session.flush()
        return link

    def get_by_id(self, link_id: int) -> Optional[Link]:
        """Get link by ID."""
        return self.session.get(Link, link_id)

    def get_for_update(self, link_id: int) -> Optional[Link]:
        """Get link by ID, locking the row until the transaction ends."""
        stmt = (
            select(Link)
            .where(Link.id == link_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.scalar(stmt)

    def update(self, link: Link) -> Link:
        """Update an existing link."""
        self.session.flush()
        return link

    def get_by_pair(self, authority_id: int, service_interaction_id: int) -> Optional[Link]:
        """Get the link for an authority and service interaction."""
        stmt = select(Link).where(
            Link.authority_id == authority_id,
            Link.service_interaction_id == service_interaction_id,
        )
        return self.session.scalar(stmt)

    def find_status_source(
        self,
        url: str,
        exclude_id: Optional[int] = None,
        policy: str = "most_recently_checked",
    ) -> Optional[Link]:
        """
        Find another link with exactly this URL and a known status.

        Args:
            url: URL to match (exact, case-sensitive)
            exclude_id: ID of the link being saved, never returned
            policy: Key of MATCH_ORDERINGS deciding which match wins

        Returns:
            The winning link, or None
        """
        stmt = select(Link).where(Link.url == url, Link.status.is_not(None))
        if exclude_id is not None:
            stmt = stmt.where(Link.id != exclude_id)
        stmt = stmt.order_by(*MATCH_ORDERINGS[policy]).limit(1)
        return self.session.scalar(stmt)

    def broken_or_missing(
        self, limit: Optional[int] = None, offset: int = 0, with_catalog: bool = False
    ) -> list[Link]:
        """Get links whose status is broken or missing, ordered by ID."""
        stmt = select(Link).where(Link.status.in_(BAD_STATUSES)).order_by(Link.id)
        if with_catalog:
            stmt = _with_catalog(stmt)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return list(self.session.scalars(stmt))

    def for_service(self, service_id: int) -> list[Link]:
        """Get every link for a service across all authorities, catalog preloaded."""
        stmt = (
            select(Link)
            .join(Link.service_interaction)
            .where(ServiceInteraction.service_id == service_id)
            .order_by(Link.id)
        )
        return list(self.session.scalars(_with_catalog(stmt)))

    def retrieve(
        self, authority_slug: str, service_slug: str, interaction_slug: str
    ) -> Optional[Link]:
        """Resolve a link from its authority, service and interaction slugs."""
        stmt = (
            select(Link)
            .join(Link.authority)
            .join(Link.service_interaction)
            .join(ServiceInteraction.service)
            .join(ServiceInteraction.interaction)
            .where(
                Authority.slug == authority_slug,
                Service.slug == service_slug,
                Interaction.slug == interaction_slug,
            )
            .options(
                contains_eager(Link.authority),
                contains_eager(Link.service_interaction).contains_eager(
                    ServiceInteraction.service
                ),
                contains_eager(Link.service_interaction).contains_eager(
                    ServiceInteraction.interaction
                ),
            )
        )
        return self.session.scalar(stmt)

    def iter_all_with_catalog(self, batch_size: int = 500) -> Iterator[Link]:
        """Stream every link with its catalog preloaded, ordered by ID."""
        stmt = _with_catalog(select(Link).order_by(Link.id)).execution_options(
            yield_per=batch_size
        )
        yield from self.session.scalars(stmt)

    def count_broken_by_authority(self) -> dict[int, int]:
        """Count broken links per authority ID."""
        stmt = (
            select(Link.authority_id, func.count(Link.id))
            .where(Link.status == LinkStatus.BROKEN)
            .group_by(Link.authority_id)
        )
        return {authority_id: count for authority_id, count in self.session.execute(stmt)}

    def count_broken_by_service(self) -> dict[int, int]:
        """Count broken links per service ID."""
        stmt = (
            select(ServiceInteraction.service_id, func.count(Link.id))
            .join(Link.service_interaction)
            .where(Link.status == LinkStatus.BROKEN)
            .group_by(ServiceInteraction.service_id)
        )
        return {service_id: count for service_id, count in self.session.execute(stmt)}

    def count(self, status: Optional[LinkStatus] = None) -> int:
        """Count links, optionally with a given status."""
        query = select(func.count(Link.id))
        if status is not None:
            query = query.where(Link.status == status)
        return self.session.scalar(query) or 0
