"""Link service layer for business logic and validation."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from locallinks.config import get_settings
from locallinks.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from locallinks.models.enums import LinkStatus
from locallinks.models.link import Link
from locallinks.services.link.propagation import StatusPropagator
from locallinks.services.link.reporting import LinkReporter
from locallinks.services.link.validation import LinkValidator
from locallinks.storage.repositories import (
    AuthorityRepository,
    LinkRepository,
    ServiceInteractionRepository,
    ServiceRepository,
)

logger = logging.getLogger(__name__)

# Fields a checker or editor may write in a single update call.
WRITABLE_FIELDS = (
    "url",
    "status",
    "link_last_checked",
    "link_errors",
    "link_warnings",
    "problem_summary",
    "suggested_fix",
    "analytics",
)


class LinkService:
    """Service layer for link writes, lookups and health reports."""

    def __init__(self, session: Session, policy: str | None = None):
        """
        Initialize link service with database session.

        Args:
            session: SQLAlchemy database session
            policy: Status match policy; defaults to the configured one
        """
        self.session = session
        self.link_repo = LinkRepository(session)
        self.authority_repo = AuthorityRepository(session)
        self.service_repo = ServiceRepository(session)
        self.service_interaction_repo = ServiceInteractionRepository(session)
        self.validator = LinkValidator()
        self.propagator = StatusPropagator(
            self.link_repo, policy or get_settings().status_match_policy
        )
        self.reporter = LinkReporter(self.link_repo, self.authority_repo)

    def create_link(
        self,
        authority_id: int,
        service_interaction_id: int,
        url: str | None = None,
        analytics: int = 0,
        **diagnostics: Any,
    ) -> Link:
        """
        Link an authority to a service interaction.

        The status fields are first derived from the URL by the propagation
        rule; diagnostics passed explicitly are then applied on top.

        Args:
            authority_id: Authority ID
            service_interaction_id: Service interaction ID
            url: Optional absolute http(s) URL
            analytics: Page view count
            **diagnostics: Any of status, link_last_checked, link_errors,
                           link_warnings, problem_summary, suggested_fix

        Returns:
            Created link

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the authority or service interaction does not exist
            DuplicateError: If the authority already has a link for the service interaction
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(authority_id, "authority_id")
        self.validator.validate_id(service_interaction_id, "service_interaction_id")
        changes = self._clean_changes({"url": url, "analytics": analytics, **diagnostics})

        authority = self.authority_repo.get_by_id(authority_id)
        if authority is None:
            raise NotFoundError("Authority", str(authority_id))
        service_interaction = self.service_interaction_repo.get_by_id(service_interaction_id)
        if service_interaction is None:
            raise NotFoundError("ServiceInteraction", str(service_interaction_id))

        pair = f"{authority_id}+{service_interaction_id}"
        if self.link_repo.get_by_pair(authority_id, service_interaction_id) is not None:
            raise DuplicateError("Link", "authority_id+service_interaction_id", pair)

        try:
            link = Link(
                authority=authority,
                service_interaction=service_interaction,
                url=changes.pop("url"),
                analytics=changes.pop("analytics"),
                link_errors=[],
                link_warnings=[],
            )
            self.propagator.apply(link, authority)
            for key, value in changes.items():
                setattr(link, key, value)
            self._touch_parents(link)
            self.link_repo.create(link)
            self.session.commit()
            return link

        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateError("Link", "authority_id+service_interaction_id", pair) from e
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to create link for %s", pair)
            raise DatabaseError(f"Failed to create link: {str(e)}", e) from e

    def update_link(self, link_id: int, /, **changes: Any) -> Link:
        """
        Update a link in one atomic write.

        This is the write path used by the external link checker and by
        editors. The row is locked for the duration of the transaction; if
        the URL changes, the propagation rule runs before the other supplied
        fields are applied.

        Args:
            link_id: Link ID
            **changes: Any of url, status, link_last_checked, link_errors,
                       link_warnings, problem_summary, suggested_fix, analytics

        Returns:
            Updated link

        Raises:
            ValidationError: If a field is unknown or invalid
            NotFoundError: If the link does not exist
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(link_id, "link_id")
        changes = self._clean_changes(changes)

        try:
            link = self.link_repo.get_for_update(link_id)
            if link is None:
                raise NotFoundError("Link", str(link_id))

            if "url" in changes:
                new_url = changes.pop("url")
                if new_url != link.url:
                    link.url = new_url
                    self.propagator.apply(link, link.authority)
            for key, value in changes.items():
                setattr(link, key, value)

            self._touch_parents(link)
            self.link_repo.update(link)
            self.session.commit()
            return link

        except NotFoundError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to update link %s", link_id)
            raise DatabaseError(f"Failed to update link: {str(e)}", e) from e

    def make_missing(self, link_id: int) -> Link:
        """
        Mark a link's page as gone: url becomes None and status "missing".

        Every other field, analytics included, is left as it was.

        Raises:
            NotFoundError: If the link does not exist
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(link_id, "link_id")

        try:
            link = self.link_repo.get_for_update(link_id)
            if link is None:
                raise NotFoundError("Link", str(link_id))

            link.url = None
            link.status = LinkStatus.MISSING
            self._touch_parents(link)
            self.link_repo.update(link)
            self.session.commit()
            return link

        except NotFoundError:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to mark link %s missing", link_id)
            raise DatabaseError(f"Failed to mark link missing: {str(e)}", e) from e

    def get_link(self, link_id: int) -> Link:
        """Get a link by ID, raising NotFoundError if absent."""
        self.validator.validate_id(link_id, "link_id")
        link = self.link_repo.get_by_id(link_id)
        if link is None:
            raise NotFoundError("Link", str(link_id))
        return link

    def retrieve(self, authority_slug: str, service_slug: str, interaction_slug: str) -> Link:
        """
        Resolve a link from authority, service and interaction slugs.

        Raises:
            NotFoundError: If any of the slugs, or the link itself, is unknown
        """
        link = self.link_repo.retrieve(authority_slug, service_slug, interaction_slug)
        if link is None:
            raise NotFoundError("Link", f"{authority_slug}/{service_slug}/{interaction_slug}")
        return link

    def broken_or_missing(self, limit: int | None = None, offset: int = 0) -> list[Link]:
        """Get links whose status is broken or missing, in a stable order."""
        if limit is not None and (not isinstance(limit, int) or limit < 0):
            raise ValidationError("limit must be a non-negative integer", "limit")
        if not isinstance(offset, int) or offset < 0:
            raise ValidationError("offset must be a non-negative integer", "offset")
        return self.link_repo.broken_or_missing(limit=limit, offset=offset)

    def for_service(self, service_id: int) -> list[Link]:
        """
        Get every link for a service across all authorities.

        Each link's service interaction, service, interaction and authority
        are loaded by the same query.

        Raises:
            NotFoundError: If the service does not exist
        """
        self.validator.validate_id(service_id, "service_id")
        if self.service_repo.get_by_id(service_id) is None:
            raise NotFoundError("Service", str(service_id))
        return self.link_repo.for_service(service_id)

    def refresh_broken_link_counts(self) -> dict[str, int]:
        """
        Recompute broken_link_count on every authority and service.

        Returns:
            Number of authorities and services with at least one broken link
        """
        try:
            by_authority = self.link_repo.count_broken_by_authority()
            by_service = self.link_repo.count_broken_by_service()
            self.authority_repo.set_broken_link_counts(by_authority)
            self.service_repo.set_broken_link_counts(by_service)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.exception("Failed to refresh broken link counts")
            raise DatabaseError(f"Failed to refresh broken link counts: {str(e)}", e) from e

        logger.info(
            "Refreshed broken link counts: %d authorities, %d services affected",
            len(by_authority),
            len(by_service),
        )
        return {"authorities": len(by_authority), "services": len(by_service)}

    def _clean_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Validate and normalise a set of link field writes."""
        unknown = set(changes) - set(WRITABLE_FIELDS)
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"Unknown link field: {field}", field)

        cleaned = dict(changes)
        if "url" in cleaned:
            self.validator.validate_url(cleaned["url"])
            cleaned["url"] = cleaned["url"] or None
        if "status" in cleaned:
            cleaned["status"] = self.validator.coerce_status(cleaned["status"])
        if "link_last_checked" in cleaned:
            cleaned["link_last_checked"] = self.validator.coerce_checked_at(
                cleaned["link_last_checked"]
            )
        for field in ("link_errors", "link_warnings"):
            if field in cleaned:
                if cleaned[field] is None:
                    cleaned[field] = []
                self.validator.validate_messages(cleaned[field], field)
                cleaned[field] = list(cleaned[field])
        for field in ("problem_summary", "suggested_fix"):
            if field in cleaned:
                self.validator.validate_text(cleaned[field], field)
        if "analytics" in cleaned:
            self.validator.validate_analytics(cleaned["analytics"])
        return cleaned

    @staticmethod
    def _touch_parents(link: Link) -> None:
        """Mark the owning authority and service as changed."""
        now = datetime.now().astimezone()
        link.authority.updated_at = now
        link.service_interaction.service.updated_at = now
