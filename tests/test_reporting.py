"""Tests for the CSV link health reports."""

import csv
import io
from datetime import datetime

import pytest

pytestmark = pytest.mark.unit

from locallinks.services.link.reporting import (
    BAD_LINKS_HEADER,
    HOMEPAGE_LINKS_STATUS_HEADER,
    LINKS_STATUS_HEADER,
)


def parse(text):
    return list(csv.reader(io.StringIO(text)))


@pytest.fixture
def reporter(link_service):
    return link_service.reporter


@pytest.fixture
def waste(factory):
    service = factory.service(label="Waste")
    interaction = factory.interaction(label="Find out")
    return factory.service_interaction(service, interaction)


class TestBadLinksReport:
    def test_lists_broken_and_missing_links(self, factory, link_service, reporter, waste):
        angus = factory.authority(name="Angus")
        fife = factory.authority(name="Fife")
        moray = factory.authority(name="Moray")
        factory.link(angus, waste, url="http://www.angus.gov.uk/waste", status="broken")
        missing = factory.link(fife, waste, url="http://www.fife.gov.uk/waste", status="ok")
        link_service.make_missing(missing.id)
        factory.link(moray, waste, url="http://www.moray.gov.uk/waste", status="ok")

        rows = parse(reporter.bad_links_url_and_status_csv())

        assert rows == [
            list(BAD_LINKS_HEADER),
            ["Angus", "Waste", "Find out", "http://www.angus.gov.uk/waste", "broken"],
            ["Fife", "Waste", "Find out", "", "missing"],
        ]

    def test_empty_store_gives_header_only(self, reporter):
        assert parse(reporter.bad_links_url_and_status_csv()) == [list(BAD_LINKS_HEADER)]

    def test_streams_one_line_per_row(self, factory, reporter):
        factory.link(status="broken")
        factory.link(status="missing")

        lines = list(reporter.iter_bad_links_url_and_status())

        assert len(lines) == 3
        assert all(line.endswith("\r\n") for line in lines)


class TestLinksStatusReport:
    def test_every_link_with_analytics(self, factory, reporter, waste):
        authority = factory.authority(name="Angus")
        factory.link(
            authority,
            waste,
            url="http://www.angus.gov.uk/waste",
            status="ok",
            analytics=73,
            link_last_checked=datetime(2016, 7, 14, 11, 34, 9),
        )
        factory.link(service_interaction=waste, url=None)

        rows = parse(reporter.links_status_csv())

        assert rows[0] == list(LINKS_STATUS_HEADER)
        assert rows[1] == [
            "Angus",
            "Waste",
            "Find out",
            "http://www.angus.gov.uk/waste",
            "ok",
            "2016-07-14T11:34:09",
            "73",
        ]
        assert rows[2][3:] == ["", "", "", "0"]

    def test_values_with_commas_are_quoted(self, factory, reporter, waste):
        authority = factory.authority(name="Bristol, City of")
        factory.link(authority, waste)

        text = reporter.links_status_csv()

        assert '"Bristol, City of"' in text
        assert parse(text)[1][0] == "Bristol, City of"


class TestHomepageLinksStatusReport:
    def test_one_row_per_authority(self, factory, catalog_service, reporter):
        angus = factory.authority(name="Angus", homepage_url="http://www.angus.gov.uk")
        catalog_service.update_homepage_status(
            angus.id, status="broken", link_last_checked=datetime(2016, 7, 14, 11, 34, 9)
        )
        factory.authority(name="Fife")

        rows = parse(reporter.homepage_links_status_csv())

        assert rows == [
            list(HOMEPAGE_LINKS_STATUS_HEADER),
            ["Angus", "angus", "http://www.angus.gov.uk", "broken", "2016-07-14T11:34:09", "0"],
            ["Fife", "fife", "", "", "", "0"],
        ]
