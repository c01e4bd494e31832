"""Tests for link field validation."""

from datetime import datetime, timedelta, timezone

import pytest

pytestmark = pytest.mark.unit

from locallinks.exceptions import ValidationError
from locallinks.models.enums import LinkStatus
from locallinks.services.link.validation import LinkValidator


class TestValidateUrl:
    """URLs must be absolute http(s) URLs with a host."""

    @pytest.mark.parametrize("url", ["example.com", "com", "http://", "www.example.com/path", "ftp://example.com"])
    def test_rejects_non_urls(self, url):
        with pytest.raises(ValidationError) as exc_info:
            LinkValidator.validate_url(url)
        assert str(exc_info.value) == "is not a URL"
        assert exc_info.value.field == "url"

    @pytest.mark.parametrize(
        "url",
        ["http://example.com", "https://example.com", "https://foo.com/path/file.html", "http://www.angus.gov.uk"],
    )
    def test_accepts_http_and_https(self, url):
        LinkValidator.validate_url(url)

    @pytest.mark.parametrize("url", [None, ""])
    def test_absent_url_is_allowed(self, url):
        LinkValidator.validate_url(url)

    def test_reports_custom_field(self):
        with pytest.raises(ValidationError) as exc_info:
            LinkValidator.validate_url("foo.com", "homepage_url")
        assert exc_info.value.field == "homepage_url"

    def test_rejects_overlong_url(self):
        with pytest.raises(ValidationError):
            LinkValidator.validate_url("http://example.com/" + "a" * 2048)


class TestCoercions:
    def test_status_from_string(self):
        assert LinkValidator.coerce_status("broken") is LinkStatus.BROKEN
        assert LinkValidator.coerce_status(None) is None

    def test_unknown_status(self):
        with pytest.raises(ValidationError) as exc_info:
            LinkValidator.coerce_status("dead")
        assert exc_info.value.field == "status"

    def test_checked_at_from_iso_string(self):
        assert LinkValidator.coerce_checked_at("2016-07-14T11:34:09") == datetime(2016, 7, 14, 11, 34, 9)

    def test_checked_at_with_offset_becomes_utc(self):
        coerced = LinkValidator.coerce_checked_at("2016-07-14T11:34:09+01:00")

        assert coerced == datetime(2016, 7, 14, 10, 34, 9, tzinfo=timezone.utc)
        assert coerced.utcoffset() == timedelta(0)

    def test_aware_datetime_becomes_utc(self):
        value = datetime(2016, 7, 14, 6, 34, 9, tzinfo=timezone(timedelta(hours=-4)))

        assert LinkValidator.coerce_checked_at(value).hour == 10

    def test_naive_datetime_is_kept(self):
        value = datetime(2016, 7, 14, 11, 34, 9)

        assert LinkValidator.coerce_checked_at(value) == value

    def test_checked_at_rejects_garbage(self):
        with pytest.raises(ValidationError):
            LinkValidator.coerce_checked_at("yesterday")

    def test_messages_must_be_strings(self):
        with pytest.raises(ValidationError) as exc_info:
            LinkValidator.validate_messages(["ok", 3], "link_errors")
        assert exc_info.value.field == "link_errors"

    def test_analytics_must_be_non_negative(self):
        with pytest.raises(ValidationError):
            LinkValidator.validate_analytics(-1)
