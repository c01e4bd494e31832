"""Tests for deriving a link's status when its URL is set or changed."""

from datetime import datetime

import pytest

pytestmark = pytest.mark.unit

from locallinks.models.enums import LinkStatus
from locallinks.services.link.propagation import PropagationSource, StatusPropagator, same_host
from locallinks.services.link_service import LinkService

CHECKED = datetime(2016, 7, 14, 11, 34, 9)


class TestSameHost:
    def test_ignores_path_and_scheme(self):
        assert same_host("https://www.angus.gov.uk/bins", "http://www.angus.gov.uk")

    def test_host_is_case_insensitive(self):
        assert same_host("http://WWW.Angus.gov.uk/", "http://www.angus.gov.uk")

    def test_subdomain_is_a_different_host(self):
        assert not same_host("http://bins.angus.gov.uk", "http://www.angus.gov.uk")

    def test_no_homepage(self):
        assert not same_host("http://www.angus.gov.uk", None)


class TestUrlCleared:
    def test_clearing_url_resets_status_fields(self, factory, link_service):
        link = factory.link(
            status="ok",
            link_last_checked=CHECKED,
            link_errors=["E1"],
            link_warnings=["W1"],
            problem_summary="Summary",
            suggested_fix="Fix it",
        )

        link = link_service.update_link(link.id, url=None)

        assert link.status is None
        assert link.link_last_checked is None
        assert link.link_errors == []
        assert link.link_warnings == []
        assert link.problem_summary == "Summary"
        assert link.suggested_fix == "Fix it"

    def test_empty_string_is_treated_as_no_url(self, factory, link_service):
        link = factory.link(status="ok", link_last_checked=CHECKED)

        link = link_service.update_link(link.id, url="")

        assert link.url is None
        assert link.status is None
        assert link.link_errors == []


class TestSiblingWithSameUrl:
    def test_new_link_copies_existing_links_status(self, factory):
        """Link B created with Link A's URL inherits A's status and errors."""
        factory.link(
            url="http://example.com/thing",
            status="ok",
            link_errors=["E1"],
            problem_summary="Invalid URL",
            link_last_checked=CHECKED,
        )

        link_b = factory.link(url="http://example.com/thing")

        assert link_b.status is LinkStatus.OK
        assert link_b.link_errors == ["E1"]
        assert link_b.problem_summary == "Invalid URL"
        assert link_b.link_last_checked == CHECKED

    def test_changed_url_copies_existing_links_status(self, factory, link_service):
        link1 = factory.link(url="http://example.com/thing", status="ok", link_last_checked=datetime.now())
        link2 = factory.link(
            url="http://example.com",
            status="ok",
            link_last_checked=CHECKED,
            problem_summary="Invalid URL",
            link_errors=["No host is given in the URL."],
        )

        link1 = link_service.update_link(link1.id, url="http://example.com")

        assert link1.status == link2.status
        assert link1.link_last_checked == link2.link_last_checked
        assert link1.link_errors == link2.link_errors

    def test_sibling_warnings_are_not_copied(self, factory, link_service):
        factory.link(url="http://example.com/a", status="ok", link_warnings=["Sibling warning"])
        link = factory.link(url="http://example.com/b", status="ok", link_warnings=["Own warning"])

        link = link_service.update_link(link.id, url="http://example.com/a")

        assert link.link_warnings == ["Own warning"]

    def test_match_is_exact_and_case_sensitive(self, factory):
        factory.link(url="http://example.com/Thing", status="broken")

        link = factory.link(url="http://example.com/thing")

        assert link.status is None

    def test_links_without_status_are_ignored(self, factory):
        factory.link(url="http://example.com/thing")

        link = factory.link(url="http://example.com/thing")

        assert link.status is None
        assert link.link_errors == []

    def test_sibling_wins_over_homepage(self, factory):
        authority = factory.authority(homepage_url="http://www.angus.gov.uk")
        factory.catalog.update_homepage_status(authority.id, status="broken", link_warnings=["W1"])
        factory.link(url="http://www.angus.gov.uk", status="ok", link_errors=[])

        link = factory.link(authority=authority, url="http://www.angus.gov.uk")

        assert link.status is LinkStatus.OK
        assert link.link_warnings == []

    def test_unchanged_url_keeps_checker_results(self, factory, link_service):
        factory.link(url="http://example.com/thing", status="broken")
        link = factory.link(url="http://example.com/other", status="ok", link_errors=["Mine"])

        link = link_service.update_link(link.id, url="http://example.com/other")

        assert link.status is LinkStatus.OK
        assert link.link_errors == ["Mine"]


class TestMatchPolicy:
    @pytest.fixture
    def siblings(self, factory):
        older = factory.link(
            url="http://example.com/shared",
            status="broken",
            link_errors=["Old"],
            link_last_checked=datetime(2016, 1, 1),
        )
        newer = factory.link(
            url="http://example.com/shared",
            status="ok",
            link_errors=["New"],
            link_last_checked=datetime(2017, 1, 1),
        )
        return older, newer

    def test_most_recently_checked_wins_by_default(self, factory, siblings):
        link = factory.link(url="http://example.com/shared")

        assert link.status is LinkStatus.OK
        assert link.link_errors == ["New"]

    def test_first_created_policy(self, db_session, factory, siblings):
        service = LinkService(db_session, policy="first_created")
        authority = factory.authority()
        service_interaction = factory.service_interaction()

        link = service.create_link(authority.id, service_interaction.id, url="http://example.com/shared")

        assert link.status is LinkStatus.BROKEN
        assert link.link_errors == ["Old"]

    def test_unknown_policy(self, link_service):
        with pytest.raises(ValueError):
            StatusPropagator(link_service.link_repo, policy="random")


class TestAuthorityHomepage:
    @pytest.fixture
    def angus(self, factory):
        authority = factory.authority(name="Angus", homepage_url="http://www.angus.gov.uk")
        return factory.catalog.update_homepage_status(
            authority.id,
            status="broken",
            link_warnings=["W1"],
            link_last_checked=CHECKED,
        )

    def test_changed_url_on_homepage_host_copies_authority_status(self, factory, link_service, angus):
        link = factory.link(
            authority=angus, url="http://example.com/thing", status="ok", link_last_checked=datetime.now()
        )

        link = link_service.update_link(link.id, url="http://www.angus.gov.uk")

        assert link.status is LinkStatus.BROKEN
        assert link.link_last_checked == CHECKED
        assert link.link_warnings == ["W1"]

    def test_new_link_on_homepage_host_copies_authority_status(self, factory, angus):
        link = factory.link(authority=angus, url="http://www.angus.gov.uk/bins")

        assert link.status is LinkStatus.BROKEN
        assert link.link_warnings == ["W1"]

    def test_other_authoritys_homepage_is_not_used(self, factory, angus):
        other = factory.authority(homepage_url="http://www.fife.gov.uk")

        link = factory.link(authority=other, url="http://www.angus.gov.uk")

        assert link.status is None
        assert link.link_warnings == []


class TestNewUnknownUrl:
    def test_changed_to_unknown_url_resets_status(self, factory, link_service):
        link = factory.link(status="ok", link_last_checked=datetime.now(), link_errors=["E"], link_warnings=["W"])

        link = link_service.update_link(link.id, url="http://example.com")

        assert link.status is None
        assert link.link_last_checked is None
        assert link.link_errors == []
        assert link.link_warnings == []

    def test_new_link_with_unknown_url_is_unchecked(self, factory):
        link = factory.link(url="http://example.com/thing")

        assert link.status is None
        assert link.link_last_checked is None
        assert link.link_errors == []
        assert link.link_warnings == []


class TestPropagatorDirectly:
    def test_reports_which_rule_fired(self, factory, link_service):
        authority = factory.authority(homepage_url="http://www.angus.gov.uk")
        factory.link(url="http://example.com/known", status="ok")
        link = factory.link(authority=authority)
        propagator = link_service.propagator

        link.url = None
        assert propagator.apply(link, authority) is PropagationSource.CLEARED
        link.url = "http://example.com/known"
        assert propagator.apply(link, authority) is PropagationSource.SIBLING
        link.url = "http://www.angus.gov.uk/x"
        assert propagator.apply(link, authority) is PropagationSource.HOMEPAGE
        link.url = "http://example.com/unknown"
        assert propagator.apply(link, authority) is PropagationSource.UNCHECKED
