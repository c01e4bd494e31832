"""MCP tool schema definitions."""

from typing import Any

_LINK_DIAGNOSTICS = {
    "url": {
        "type": ["string", "null"],
        "description": "Absolute http(s) URL; null or empty clears it",
    },
    "status": {
        "type": ["string", "null"],
        "enum": ["ok", "broken", "missing", "unchecked", None],
        "description": "Outcome of the most recent check",
    },
    "link_last_checked": {
        "type": ["string", "null"],
        "description": "ISO-8601 timestamp of the most recent check",
    },
    "link_errors": {"type": "array", "items": {"type": "string"}},
    "link_warnings": {"type": "array", "items": {"type": "string"}},
    "problem_summary": {"type": ["string", "null"]},
    "suggested_fix": {"type": ["string", "null"]},
    "analytics": {"type": "integer", "minimum": 0},
}


def get_tool_schemas() -> dict[str, dict[str, Any]]:
    """Get all MCP tool schemas."""
    return {
        "retrieve_link": {
            "name": "retrieve_link",
            "description": "Find an authority's link for a service interaction by slugs",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "authority_slug": {"type": "string", "description": "Authority slug"},
                    "service_slug": {"type": "string", "description": "Service slug"},
                    "interaction_slug": {"type": "string", "description": "Interaction slug"},
                },
                "required": ["authority_slug", "service_slug", "interaction_slug"],
            },
        },
        "find_service_interaction": {
            "name": "find_service_interaction",
            "description": "Find a service interaction by LGSL and LGIL codes",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "lgsl_code": {"type": "integer", "description": "Service LGSL code"},
                    "lgil_code": {"type": "integer", "description": "Interaction LGIL code"},
                },
                "required": ["lgsl_code", "lgil_code"],
            },
        },
        "update_link": {
            "name": "update_link",
            "description": (
                "Record a check result or edit for a link. Changing the URL "
                "re-derives its status from links sharing the URL or from the "
                "authority homepage"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "link_id": {"type": "integer", "description": "Link ID"},
                    **_LINK_DIAGNOSTICS,
                },
                "required": ["link_id"],
            },
        },
        "make_link_missing": {
            "name": "make_link_missing",
            "description": "Mark a link's page as no longer published",
            "inputSchema": {
                "type": "object",
                "properties": {"link_id": {"type": "integer", "description": "Link ID"}},
                "required": ["link_id"],
            },
        },
        "list_bad_links": {
            "name": "list_bad_links",
            "description": "List links whose status is broken or missing",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "limit": {"type": "integer", "description": "Maximum results (default: 100)"},
                    "offset": {"type": "integer", "description": "Results to skip (default: 0)"},
                },
            },
        },
        "get_csv_report": {
            "name": "get_csv_report",
            "description": "Generate a link health report as CSV",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "report": {
                        "type": "string",
                        "enum": [
                            "homepage_links_status",
                            "links_status",
                            "bad_links_url_and_status",
                        ],
                        "description": "Which report to generate",
                    },
                },
                "required": ["report"],
            },
        },
    }
