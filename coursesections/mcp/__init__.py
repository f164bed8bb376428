"""MCP module with tool schemas, handlers, and serializers."""

from coursesections.mcp.serializers import serialize_record, to_text_content
from coursesections.mcp.tool_handlers import TOOL_HANDLERS, call_tool_handler
from coursesections.mcp.tool_schemas import get_tool_schemas

__all__ = [
    "call_tool_handler",
    "TOOL_HANDLERS",
    "get_tool_schemas",
    "serialize_record",
    "to_text_content",
]
