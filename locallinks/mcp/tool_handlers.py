"""MCP tool handlers for executing tool operations."""

import json
from typing import Any

from mcp import McpError
from mcp.types import ErrorData, TextContent

from locallinks.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from locallinks.mcp.serializers import serialize_link, serialize_service_interaction
from locallinks.services.catalog_service import CatalogService
from locallinks.services.link_service import WRITABLE_FIELDS, LinkService

REPORTS = {
    "homepage_links_status": "homepage_links_status_csv",
    "links_status": "links_status_csv",
    "bad_links_url_and_status": "bad_links_url_and_status_csv",
}


def _text(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


async def handle_retrieve_link(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle retrieve_link tool."""
    with db.session() as session:
        link = LinkService(session).retrieve(
            arguments["authority_slug"],
            arguments["service_slug"],
            arguments["interaction_slug"],
        )
        return _text(serialize_link(link))


async def handle_find_service_interaction(
    arguments: dict[str, Any], db: Any
) -> list[TextContent]:
    """Handle find_service_interaction tool."""
    with db.session() as session:
        service_interaction = CatalogService(session).find_by_codes(
            arguments["lgsl_code"], arguments["lgil_code"]
        )
        return _text(serialize_service_interaction(service_interaction))


async def handle_update_link(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle update_link tool."""
    changes = {key: arguments[key] for key in WRITABLE_FIELDS if key in arguments}
    with db.session() as session:
        link = LinkService(session).update_link(arguments["link_id"], **changes)
        return _text(serialize_link(link))


async def handle_make_link_missing(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle make_link_missing tool."""
    with db.session() as session:
        link = LinkService(session).make_missing(arguments["link_id"])
        return _text(serialize_link(link))


async def handle_list_bad_links(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle list_bad_links tool."""
    with db.session() as session:
        links = LinkService(session).broken_or_missing(
            limit=arguments.get("limit", 100),
            offset=arguments.get("offset", 0),
        )
        return _text({"links": [serialize_link(link) for link in links]})


async def handle_get_csv_report(arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """Handle get_csv_report tool; the CSV is returned verbatim."""
    report = arguments["report"]
    if report not in REPORTS:
        raise ValidationError(f"Report must be one of: {', '.join(REPORTS)}", "report")
    with db.session() as session:
        reporter = LinkService(session).reporter
        csv_text = getattr(reporter, REPORTS[report])()
        return [TextContent(type="text", text=csv_text)]


TOOL_HANDLERS = {
    "retrieve_link": handle_retrieve_link,
    "find_service_interaction": handle_find_service_interaction,
    "update_link": handle_update_link,
    "make_link_missing": handle_make_link_missing,
    "list_bad_links": handle_list_bad_links,
    "get_csv_report": handle_get_csv_report,
}


async def call_tool_handler(tool_name: str, arguments: dict[str, Any], db: Any) -> list[TextContent]:
    """
    Call the appropriate tool handler.

    Args:
        tool_name: Name of the tool to call
        arguments: Tool arguments
        db: Database instance

    Returns:
        List of TextContent with tool execution result

    Raises:
        McpError: If tool name is unknown or handler raises an error
    """
    if tool_name not in TOOL_HANDLERS:
        raise McpError(
            ErrorData(
                code=-32601,  # Method not found
                message=f"Unknown tool: {tool_name}",
            )
        )

    handler = TOOL_HANDLERS[tool_name]

    try:
        return await handler(arguments, db)
    except McpError:
        raise
    except KeyError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Missing required argument: {e.args[0]}",
            )
        )
    except ValidationError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Validation error: {str(e)}",
            )
        )
    except NotFoundError as e:
        raise McpError(
            ErrorData(
                code=-32001,  # Custom error: not found
                message=str(e),
            )
        )
    except DuplicateError as e:
        raise McpError(
            ErrorData(
                code=-32002,  # Custom error: duplicate
                message=str(e),
            )
        )
    except DatabaseError as e:
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Database error: {str(e)}",
            )
        )
    except Exception as e:
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message=f"Internal error: {str(e)}",
            )
        )
