"""Link validation logic."""

from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit

from locallinks.exceptions import ValidationError
from locallinks.models.enums import LinkStatus


class LinkValidator:
    """Validates link data according to business rules."""

    URL_MAX_LENGTH = 2048
    TEXT_MAX_LENGTH = 500
    VALID_SCHEMES = {"http", "https"}

    @staticmethod
    def is_url(value: str) -> bool:
        """Return True if value is an absolute http(s) URL with a host."""
        try:
            parts = urlsplit(value)
            hostname = parts.hostname
        except ValueError:
            return False
        return parts.scheme in LinkValidator.VALID_SCHEMES and bool(hostname)

    @staticmethod
    def validate_url(url: Any, field: str = "url") -> None:
        """
        Validate an optional URL.

        Args:
            url: URL to validate; None and "" mean "no URL"
            field: Field name reported on failure

        Raises:
            ValidationError: If url is present but not an absolute http(s) URL
        """
        if url is None or url == "":
            return
        if not isinstance(url, str):
            raise ValidationError("is not a URL", field)
        if len(url) > LinkValidator.URL_MAX_LENGTH:
            raise ValidationError(
                f"URL must be at most {LinkValidator.URL_MAX_LENGTH} characters", field
            )
        if not LinkValidator.is_url(url):
            raise ValidationError("is not a URL", field)

    @staticmethod
    def validate_id(value: Any, field: str = "id") -> None:
        """Validate a positive integer identifier."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", field)
        if value < 1:
            raise ValidationError(f"{field} must be positive", field)

    @staticmethod
    def coerce_status(status: Any) -> LinkStatus | None:
        """
        Convert a status value into a LinkStatus.

        Raises:
            ValidationError: If status is not one of ok/broken/missing/unchecked
        """
        if status is None or isinstance(status, LinkStatus):
            return status
        try:
            return LinkStatus(status)
        except ValueError:
            valid = ", ".join(s.value for s in LinkStatus)
            raise ValidationError(f"Status must be one of: {valid}", "status") from None

    @staticmethod
    def validate_messages(messages: Any, field: str) -> None:
        """Validate an ordered list of diagnostic strings."""
        if not isinstance(messages, list) or not all(isinstance(m, str) for m in messages):
            raise ValidationError(f"{field} must be a list of strings", field)

    @staticmethod
    def validate_text(value: Any, field: str) -> None:
        """Validate an optional short free-text field."""
        if value is None:
            return
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string", field)
        if len(value) > LinkValidator.TEXT_MAX_LENGTH:
            raise ValidationError(
                f"{field} must be at most {LinkValidator.TEXT_MAX_LENGTH} characters", field
            )

    @staticmethod
    def coerce_checked_at(value: Any) -> datetime | None:
        """
        Accept a datetime or an ISO-8601 string for link_last_checked.

        Values carrying a UTC offset are converted to UTC; naive values are
        taken to be UTC already.
        """
        if value is None:
            return None
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                pass
        if not isinstance(value, datetime):
            raise ValidationError(
                "link_last_checked must be an ISO-8601 timestamp", "link_last_checked"
            )
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value

    @staticmethod
    def validate_analytics(value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError("analytics must be a non-negative integer", "analytics")
