"""Catalog service layer: authorities, services, interactions and their pairings."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from locallinks.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from locallinks.models.authority import Authority
from locallinks.models.enums import Tier
from locallinks.models.service import Interaction, Service, ServiceTier
from locallinks.models.service_interaction import ServiceInteraction
from locallinks.services.catalog.validation import CatalogValidator, slugify
from locallinks.services.link.validation import LinkValidator
from locallinks.storage.repositories import (
    AuthorityRepository,
    InteractionRepository,
    ServiceInteractionRepository,
    ServiceRepository,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for the reference data links hang off."""

    def __init__(self, session: Session):
        """
        Initialize catalog service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.authority_repo = AuthorityRepository(session)
        self.service_repo = ServiceRepository(session)
        self.interaction_repo = InteractionRepository(session)
        self.service_interaction_repo = ServiceInteractionRepository(session)
        self.validator = CatalogValidator()

    # Authorities

    def create_authority(
        self,
        name: str,
        gss: str,
        snac: str,
        tier: Tier | str,
        slug: str | None = None,
        homepage_url: str | None = None,
        parent_authority_id: int | None = None,
    ) -> Authority:
        """
        Create a local authority.

        Args:
            name: Authority name
            gss: GSS code (unique)
            snac: SNAC code (unique)
            tier: county, district or unitary
            slug: URL slug (unique); derived from name if omitted
            homepage_url: Optional absolute http(s) URL of the authority homepage
            parent_authority_id: Optional ID of the county a district belongs to

        Returns:
            Created authority

        Raises:
            ValidationError: If any field is invalid
            DuplicateError: If slug, gss or snac is already taken
            NotFoundError: If the parent authority does not exist
            DatabaseError: If database operation fails
        """
        self.validator.validate_text(name, "name")
        self.validator.validate_text(gss, "gss", CatalogValidator.CODE_MAX_LENGTH)
        self.validator.validate_text(snac, "snac", CatalogValidator.CODE_MAX_LENGTH)
        tier = self.validator.coerce_tier(tier)
        slug = slug if slug is not None else slugify(name)
        self.validator.validate_text(slug, "slug")
        LinkValidator.validate_url(homepage_url, "homepage_url")

        if self.authority_repo.get_by_slug(slug) is not None:
            raise DuplicateError("Authority", "slug", slug)
        if self.authority_repo.get_by_gss(gss) is not None:
            raise DuplicateError("Authority", "gss", gss)
        if self.authority_repo.get_by_snac(snac) is not None:
            raise DuplicateError("Authority", "snac", snac)
        if parent_authority_id is not None:
            self.validator.validate_code(parent_authority_id, "parent_authority_id")
            if self.authority_repo.get_by_id(parent_authority_id) is None:
                raise NotFoundError("Authority", str(parent_authority_id))

        authority = Authority(
            name=name,
            slug=slug,
            gss=gss,
            snac=snac,
            tier=tier,
            homepage_url=homepage_url or None,
            parent_authority_id=parent_authority_id,
            link_errors=[],
            link_warnings=[],
            broken_link_count=0,
        )
        return self._commit_new(authority, self.authority_repo.create, "Authority", "slug", slug)

    def get_authority(self, slug: str) -> Authority:
        """
        Get an authority by slug.

        Raises:
            NotFoundError: If no authority has the slug
        """
        authority = self.authority_repo.get_by_slug(slug)
        if authority is None:
            raise NotFoundError("Authority", slug)
        return authority

    def list_authorities(self) -> list[Authority]:
        """Get every authority ordered by name."""
        return self.authority_repo.list_all()

    def update_homepage_status(self, authority_id: int, /, **changes: Any) -> Authority:
        """
        Record the homepage checker's result for an authority.

        Args:
            authority_id: Authority ID
            **changes: Any of homepage_url, status, link_last_checked,
                       link_errors, link_warnings, problem_summary, suggested_fix

        Returns:
            Updated authority

        Raises:
            ValidationError: If a field is unknown or invalid
            NotFoundError: If the authority does not exist
            DatabaseError: If database operation fails
        """
        allowed = {
            "homepage_url",
            "status",
            "link_last_checked",
            "link_errors",
            "link_warnings",
            "problem_summary",
            "suggested_fix",
        }
        unknown = set(changes) - allowed
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"Unknown authority field: {field}", field)
        if "homepage_url" in changes:
            LinkValidator.validate_url(changes["homepage_url"], "homepage_url")
            changes["homepage_url"] = changes["homepage_url"] or None
        if "status" in changes:
            changes["status"] = LinkValidator.coerce_status(changes["status"])
        if "link_last_checked" in changes:
            changes["link_last_checked"] = LinkValidator.coerce_checked_at(
                changes["link_last_checked"]
            )
        for field in ("link_errors", "link_warnings"):
            if field in changes:
                LinkValidator.validate_messages(changes[field], field)
                changes[field] = list(changes[field])
        for field in ("problem_summary", "suggested_fix"):
            if field in changes:
                LinkValidator.validate_text(changes[field], field)

        authority = self.authority_repo.get_by_id(authority_id)
        if authority is None:
            raise NotFoundError("Authority", str(authority_id))

        try:
            for key, value in changes.items():
                setattr(authority, key, value)
            self.session.flush()
            self.session.commit()
            return authority
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to update homepage status for authority %s", authority_id)
            raise DatabaseError(f"Failed to update authority: {str(e)}", e) from e

    def provided_services(self, authority_id: int) -> list[Service]:
        """
        Get the enabled services an authority's tier provides, ordered by label.

        Raises:
            NotFoundError: If the authority does not exist
        """
        authority = self.authority_repo.get_by_id(authority_id)
        if authority is None:
            raise NotFoundError("Authority", str(authority_id))
        return self.service_repo.enabled_for_tier(authority.tier)

    # Services and interactions

    def create_service(
        self,
        lgsl_code: int,
        label: str,
        slug: str | None = None,
        enabled: bool = False,
        tiers: Any = None,
    ) -> Service:
        """
        Create a catalogued service.

        Args:
            lgsl_code: LGSL code (unique)
            label: Service label (unique)
            slug: URL slug (unique); derived from label if omitted
            enabled: Whether the service is offered
            tiers: Tier label ("all", "county/unitary", "district/unitary"),
                   or a list of tiers, or None

        Raises:
            ValidationError: If any field is invalid
            DuplicateError: If lgsl_code, label or slug is already taken
            DatabaseError: If database operation fails
        """
        self.validator.validate_code(lgsl_code, "lgsl_code")
        self.validator.validate_text(label, "label")
        slug = slug if slug is not None else slugify(label)
        self.validator.validate_text(slug, "slug")
        tier_set = self.validator.resolve_tiers(tiers)

        if self.service_repo.get_by_lgsl_code(lgsl_code) is not None:
            raise DuplicateError("Service", "lgsl_code", str(lgsl_code))
        if self.service_repo.get_by_label(label) is not None:
            raise DuplicateError("Service", "label", label)
        if self.service_repo.get_by_slug(slug) is not None:
            raise DuplicateError("Service", "slug", slug)

        service = Service(
            lgsl_code=lgsl_code,
            label=label,
            slug=slug,
            enabled=bool(enabled),
            broken_link_count=0,
            service_tiers=[ServiceTier(tier=tier) for tier in sorted(tier_set)],
        )
        return self._commit_new(service, self.service_repo.create, "Service", "slug", slug)

    def set_service_tiers(self, service_id: int, tiers: Any) -> Service:
        """
        Replace the tiers that may offer a service.

        Raises:
            ValidationError: If tiers cannot be resolved
            NotFoundError: If the service does not exist
            DatabaseError: If database operation fails
        """
        tier_set = self.validator.resolve_tiers(tiers)
        service = self.service_repo.get_by_id(service_id)
        if service is None:
            raise NotFoundError("Service", str(service_id))

        try:
            kept = [st for st in service.service_tiers if st.tier in tier_set]
            existing = {st.tier for st in kept}
            service.service_tiers = kept + [
                ServiceTier(tier=tier) for tier in sorted(tier_set - existing)
            ]
            self.session.flush()
            self.session.commit()
            return service
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to set service tiers: {str(e)}", e) from e

    def get_service(self, slug: str) -> Service:
        """Get a service by slug, raising NotFoundError if absent."""
        service = self.service_repo.get_by_slug(slug)
        if service is None:
            raise NotFoundError("Service", slug)
        return service

    def create_interaction(self, lgil_code: int, label: str, slug: str | None = None) -> Interaction:
        """
        Create a catalogued interaction.

        Raises:
            ValidationError: If any field is invalid
            DuplicateError: If lgil_code, label or slug is already taken
            DatabaseError: If database operation fails
        """
        self.validator.validate_code(lgil_code, "lgil_code")
        self.validator.validate_text(label, "label")
        slug = slug if slug is not None else slugify(label)
        self.validator.validate_text(slug, "slug")

        if self.interaction_repo.get_by_lgil_code(lgil_code) is not None:
            raise DuplicateError("Interaction", "lgil_code", str(lgil_code))
        if self.interaction_repo.get_by_label(label) is not None:
            raise DuplicateError("Interaction", "label", label)
        if self.interaction_repo.get_by_slug(slug) is not None:
            raise DuplicateError("Interaction", "slug", slug)

        interaction = Interaction(lgil_code=lgil_code, label=label, slug=slug)
        return self._commit_new(
            interaction, self.interaction_repo.create, "Interaction", "slug", slug
        )

    def create_service_interaction(
        self,
        service_id: int,
        interaction_id: int,
        govuk_slug: str | None = None,
        govuk_title: str | None = None,
        live: bool | None = None,
    ) -> ServiceInteraction:
        """
        Pair a service with an interaction.

        Raises:
            NotFoundError: If the service or interaction does not exist
            DuplicateError: If the pair already exists
            DatabaseError: If database operation fails
        """
        if self.service_repo.get_by_id(service_id) is None:
            raise NotFoundError("Service", str(service_id))
        if self.interaction_repo.get_by_id(interaction_id) is None:
            raise NotFoundError("Interaction", str(interaction_id))
        pair = f"{service_id}+{interaction_id}"
        if self.service_interaction_repo.get_by_pair(service_id, interaction_id) is not None:
            raise DuplicateError("ServiceInteraction", "service_id+interaction_id", pair)

        service_interaction = ServiceInteraction(
            service_id=service_id,
            interaction_id=interaction_id,
            govuk_slug=govuk_slug,
            govuk_title=govuk_title,
            live=live,
        )
        return self._commit_new(
            service_interaction,
            self.service_interaction_repo.create,
            "ServiceInteraction",
            "service_id+interaction_id",
            pair,
        )

    def find_by_codes(self, lgsl_code: int, lgil_code: int) -> ServiceInteraction:
        """
        Resolve a service interaction from its LGSL and LGIL codes.

        Raises:
            NotFoundError: If no service interaction joins the two codes
        """
        service_interaction = self.service_interaction_repo.get_by_codes(lgsl_code, lgil_code)
        if service_interaction is None:
            raise NotFoundError("ServiceInteraction", f"{lgsl_code}/{lgil_code}")
        return service_interaction

    def service_interactions_for(self, service_id: int) -> list[ServiceInteraction]:
        """Get a service's interactions ordered by LGIL code."""
        return self.service_interaction_repo.list_for_service(service_id)

    def _commit_new(self, obj, create, resource_type: str, field: str, value: str):
        """Insert obj, turning a unique-constraint race into DuplicateError."""
        try:
            create(obj)
            self.session.commit()
            return obj
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateError(resource_type, field, value) from e
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to create %s", resource_type)
            raise DatabaseError(f"Failed to create {resource_type}: {str(e)}", e) from e
