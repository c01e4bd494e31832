"""Write-time derivation of a link's status from data already in the store.

When a link's URL is set or changed, its diagnostic fields are derived, in
order of preference, from:

1. nothing, if the URL was cleared;
2. another link that already carries the same URL and a known status;
3. the owning authority's homepage health, if the URL is on the homepage host;
4. nothing otherwise: the URL is new and unchecked.
"""

import logging
from enum import Enum
from urllib.parse import urlsplit

from locallinks.models.authority import Authority
from locallinks.models.link import Link
from locallinks.storage.repositories import MATCH_ORDERINGS, LinkRepository

logger = logging.getLogger(__name__)


class PropagationSource(str, Enum):
    """Which rule supplied the link's status."""

    CLEARED = "cleared"
    SIBLING = "sibling"
    HOMEPAGE = "homepage"
    UNCHECKED = "unchecked"


def same_host(url: str, other_url: str | None) -> bool:
    """Compare the host part of two URLs, ignoring case, scheme and path."""
    if not other_url:
        return False
    try:
        host = urlsplit(url).hostname
        other_host = urlsplit(other_url).hostname
    except ValueError:
        return False
    return bool(host) and host == other_host


class StatusPropagator:
    """Applies the status propagation rule to a link before it is saved."""

    def __init__(self, link_repo: LinkRepository, policy: str = "most_recently_checked"):
        """
        Args:
            link_repo: Repository used for the same-URL lookup
            policy: Tie-break when several links share the URL (key of MATCH_ORDERINGS)
        """
        if policy not in MATCH_ORDERINGS:
            raise ValueError(f"Unknown status match policy: {policy!r}")
        self.link_repo = link_repo
        self.policy = policy

    def apply(self, link: Link, authority: Authority) -> PropagationSource:
        """
        Derive status, last-checked time and diagnostics for the link's current URL.

        Args:
            link: Link whose url has just been set (pending or persistent)
            authority: The link's owning authority

        Returns:
            The rule that fired
        """
        if not link.url:
            self._clear(link)
            source = PropagationSource.CLEARED
        else:
            sibling = self.link_repo.find_status_source(
                link.url, exclude_id=link.id, policy=self.policy
            )
            if sibling is not None:
                link.status = sibling.status
                link.link_last_checked = sibling.link_last_checked
                link.link_errors = list(sibling.link_errors)
                link.problem_summary = sibling.problem_summary
                source = PropagationSource.SIBLING
            elif same_host(link.url, authority.homepage_url):
                link.status = authority.status
                link.link_last_checked = authority.link_last_checked
                link.link_warnings = list(authority.link_warnings)
                source = PropagationSource.HOMEPAGE
            else:
                self._clear(link)
                source = PropagationSource.UNCHECKED

        logger.debug(
            "Propagated status for link %s (%s): %s -> %s",
            link.id,
            link.url,
            source.value,
            link.status.value if link.status else None,
        )
        return source

    @staticmethod
    def _clear(link: Link) -> None:
        link.status = None
        link.link_last_checked = None
        link.link_errors = []
        link.link_warnings = []
