"""MCP module with tool schemas, handlers, and serializers."""

from locallinks.mcp.serializers import serialize_link, serialize_model
from locallinks.mcp.tool_handlers import TOOL_HANDLERS, call_tool_handler
from locallinks.mcp.tool_schemas import get_tool_schemas

__all__ = [
    "call_tool_handler",
    "TOOL_HANDLERS",
    "get_tool_schemas",
    "serialize_model",
    "serialize_link",
]
