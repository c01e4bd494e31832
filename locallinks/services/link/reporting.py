"""Link health reports rendered as CSV."""

import csv
import io
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from enum import Enum
from typing import Any

from locallinks.exceptions import DatabaseError
from locallinks.models.authority import Authority
from locallinks.models.link import Link
from locallinks.storage.repositories import AuthorityRepository, LinkRepository

logger = logging.getLogger(__name__)

HOMEPAGE_LINKS_STATUS_HEADER = (
    "name",
    "slug",
    "homepage_url",
    "status",
    "link_last_checked",
    "broken_link_count",
)
LINKS_STATUS_HEADER = (
    "authority_name",
    "service_label",
    "interaction_label",
    "url",
    "status",
    "link_last_checked",
    "analytics",
)
BAD_LINKS_HEADER = (
    "authority_name",
    "service_label",
    "interaction_label",
    "url",
    "status",
)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _csv_lines(header: Iterable[str], rows: Iterable[Iterable[Any]]) -> Iterator[str]:
    """Yield one CSV-encoded line per row, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    def flush() -> str:
        line = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return line

    writer.writerow(header)
    yield flush()
    for row in rows:
        writer.writerow([_cell(value) for value in row])
        yield flush()


class LinkReporter:
    """Generates CSV health reports from the link and authority tables."""

    def __init__(self, link_repo: LinkRepository, authority_repo: AuthorityRepository):
        """
        Initialize link reporter with repositories.

        Args:
            link_repo: Link repository for data access
            authority_repo: Authority repository for homepage data
        """
        self.link_repo = link_repo
        self.authority_repo = authority_repo

    @staticmethod
    def _homepage_row(authority: Authority) -> tuple:
        return (
            authority.name,
            authority.slug,
            authority.homepage_url,
            authority.status,
            authority.link_last_checked,
            authority.broken_link_count,
        )

    @staticmethod
    def _link_row(link: Link) -> tuple:
        return (
            link.authority.name,
            link.service.label,
            link.interaction.label,
            link.url,
            link.status,
            link.link_last_checked,
            link.analytics,
        )

    @staticmethod
    def _bad_link_row(link: Link) -> tuple:
        return (
            link.authority.name,
            link.service.label,
            link.interaction.label,
            link.url,
            link.status,
        )

    def iter_homepage_links_status(self) -> Iterator[str]:
        """Yield the homepage status report, one line per authority."""
        rows = (self._homepage_row(a) for a in self.authority_repo.list_all())
        return self._report("homepage_links_status", HOMEPAGE_LINKS_STATUS_HEADER, rows)

    def iter_links_status(self) -> Iterator[str]:
        """Yield the full link status report, one line per link."""
        rows = (self._link_row(link) for link in self.link_repo.iter_all_with_catalog())
        return self._report("links_status", LINKS_STATUS_HEADER, rows)

    def iter_bad_links_url_and_status(self) -> Iterator[str]:
        """Yield the broken-or-missing link report."""
        links = self.link_repo.broken_or_missing(with_catalog=True)
        rows = (self._bad_link_row(link) for link in links)
        return self._report("bad_links_url_and_status", BAD_LINKS_HEADER, rows)

    def homepage_links_status_csv(self) -> str:
        """Return the homepage status report as a complete CSV document."""
        return "".join(self.iter_homepage_links_status())

    def links_status_csv(self) -> str:
        """Return the full link status report as a complete CSV document."""
        return "".join(self.iter_links_status())

    def bad_links_url_and_status_csv(self) -> str:
        """Return the broken-or-missing link report as a complete CSV document."""
        return "".join(self.iter_bad_links_url_and_status())

    def _report(
        self, name: str, header: Iterable[str], rows: Iterable[Iterable[Any]]
    ) -> Iterator[str]:
        count = 0
        try:
            for index, line in enumerate(_csv_lines(header, rows)):
                count = index
                yield line
        except Exception as e:
            logger.exception("Failed to generate %s report", name)
            raise DatabaseError(f"Failed to generate {name} report: {str(e)}", e) from e
        logger.info("Generated %s report with %d rows", name, count)
