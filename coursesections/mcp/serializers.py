"""Result serialization for MCP responses."""

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from mcp.types import TextContent


def serialize_record(obj: Any) -> Any:
    """
    Serialize a result record (or list of records) to plain JSON data.

    Args:
        obj: Dataclass instance, list of them, or plain value

    Returns:
        JSON-serializable representation
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, list):
        return [serialize_record(item) for item in obj]
    return obj


def to_text_content(obj: Any) -> list[TextContent]:
    """Wrap a result as the single text content item of a tool response."""
    return [TextContent(type="text", text=json.dumps(serialize_record(obj), indent=2))]
