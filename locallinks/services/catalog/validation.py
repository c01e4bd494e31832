"""Catalog validation logic."""

import re
from collections.abc import Iterable
from typing import Any

from locallinks.exceptions import ValidationError
from locallinks.models.enums import TIER_LABELS, Tier


class CatalogValidator:
    """Validates authority, service and interaction data."""

    TEXT_MAX_LENGTH = 255
    CODE_MAX_LENGTH = 20

    @staticmethod
    def validate_text(value: Any, field: str, max_length: int = TEXT_MAX_LENGTH) -> None:
        """
        Validate a required, non-empty string field.

        Raises:
            ValidationError: If value is missing, blank or too long
        """
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string", field)
        if not value.strip():
            raise ValidationError(f"{field} is required and cannot be empty", field)
        if len(value) > max_length:
            raise ValidationError(f"{field} must be at most {max_length} characters", field)

    @staticmethod
    def validate_code(value: Any, field: str) -> None:
        """Validate an LGSL/LGIL code (positive integer)."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", field)
        if value < 0:
            raise ValidationError(f"{field} cannot be negative", field)

    @staticmethod
    def coerce_tier(value: Any) -> Tier:
        """Convert a tier value into a Tier; None is not a tier."""
        if isinstance(value, Tier):
            return value
        try:
            return Tier(value)
        except ValueError:
            valid = ", ".join(t.value for t in Tier)
            raise ValidationError(f"Tier must be one of: {valid}", "tier") from None

    @staticmethod
    def resolve_tiers(tiers: Any) -> frozenset[Tier]:
        """
        Resolve a service's tiers from a label ("all", "county/unitary",
        "district/unitary"), a single tier, an iterable of tiers, or None.
        """
        if tiers is None:
            return frozenset()
        if isinstance(tiers, str):
            if tiers in TIER_LABELS:
                return TIER_LABELS[tiers]
            return frozenset({CatalogValidator.coerce_tier(tiers)})
        if isinstance(tiers, Iterable):
            return frozenset(CatalogValidator.coerce_tier(t) for t in tiers)
        raise ValidationError("Tiers must be a tier label or a list of tiers", "tiers")


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated slug made of ASCII letters and digits."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
