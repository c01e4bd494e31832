"""Model serialization for MCP and HTTP responses."""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import inspect


def _plain(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def serialize_model(obj: Any) -> dict[str, Any]:
    """
    Serialize the column attributes of a SQLAlchemy model to a dictionary.

    Expired attributes are refreshed, so this is safe to call after commit
    while the session is still open.

    Args:
        obj: SQLAlchemy model instance

    Returns:
        Dictionary representation of the model
    """
    mapper = inspect(obj).mapper
    return {attr.key: _plain(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def serialize_service_interaction(service_interaction: Any) -> dict[str, Any]:
    """Serialize a service interaction with its service and interaction."""
    result = serialize_model(service_interaction)
    result["service"] = serialize_model(service_interaction.service)
    result["interaction"] = serialize_model(service_interaction.interaction)
    return result


def serialize_link(link: Any) -> dict[str, Any]:
    """
    Serialize a link with the slugs and labels it hangs off.

    Args:
        link: Link model instance

    Returns:
        Dictionary representation of the link, with authority, service and
        interaction summaries
    """
    result = serialize_model(link)
    result["authority"] = {"slug": link.authority.slug, "name": link.authority.name}
    result["service"] = {
        "slug": link.service.slug,
        "label": link.service.label,
        "lgsl_code": link.service.lgsl_code,
    }
    result["interaction"] = {
        "slug": link.interaction.slug,
        "label": link.interaction.label,
        "lgil_code": link.interaction.lgil_code,
    }
    return result
