"""Database models for Local Links Manager."""

from locallinks.models.authority import Authority
from locallinks.models.enums import LinkStatus, Tier
from locallinks.models.link import Link
from locallinks.models.service import Interaction, Service, ServiceTier
from locallinks.models.service_interaction import ServiceInteraction

__all__ = [
    "Authority",
    "Service",
    "ServiceTier",
    "Interaction",
    "ServiceInteraction",
    "Link",
    "LinkStatus",
    "Tier",
]
