"""Closed enumerations for link status and authority tiers."""

from enum import Enum


class LinkStatus(str, Enum):
    """Outcome of the most recent check of a URL."""

    OK = "ok"
    BROKEN = "broken"
    MISSING = "missing"
    UNCHECKED = "unchecked"


class Tier(str, Enum):
    """Tier classification of a local authority."""

    COUNTY = "county"
    DISTRICT = "district"
    UNITARY = "unitary"


# Labels used by the service import for the tiers that may offer a service.
TIER_LABELS: dict[str, frozenset[Tier]] = {
    "all": frozenset({Tier.COUNTY, Tier.DISTRICT, Tier.UNITARY}),
    "county/unitary": frozenset({Tier.COUNTY, Tier.UNITARY}),
    "district/unitary": frozenset({Tier.DISTRICT, Tier.UNITARY}),
}


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum members by value rather than by name."""
    return [member.value for member in enum_cls]
