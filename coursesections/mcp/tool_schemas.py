"""MCP tool schema definitions."""

from typing import Any

from pydantic import BaseModel

from coursesections.mcp.schemas import (
    CreateSectionsRequest,
    DeleteSectionsRequest,
    GetSectionsRequest,
    MoveSectionRequest,
    UpdateSectionFormatOptionsRequest,
    UpdateSectionNamesRequest,
    UpdateSectionsRequest,
)

# name -> (description, request model)
TOOLS: dict[str, tuple[str, type[BaseModel]]] = {
    "create_sections": (
        "Create sections at a given position (0 appends to the end of the course)",
        CreateSectionsRequest,
    ),
    "delete_sections": (
        "Delete sections by number and/or id; with no filter all sections but the first are deleted",
        DeleteSectionsRequest,
    ),
    "move_section": (
        "Move a section to a given position",
        MoveSectionRequest,
    ),
    "get_sections": (
        "Get settings of sections by number and/or id; with no filter all sections are returned",
        GetSectionsRequest,
    ),
    "update_sections": (
        "Update name, summary, visibility, highlight and format options of sections",
        UpdateSectionsRequest,
    ),
    "update_section_names": (
        "Rename sections",
        UpdateSectionNamesRequest,
    ),
    "update_section_format_options": (
        "Set course format options of sections",
        UpdateSectionFormatOptionsRequest,
    ),
    "get_section_names": (
        "Get number, id and name of sections",
        GetSectionsRequest,
    ),
    "get_section_format_options": (
        "Get number, id and course format options of sections",
        GetSectionsRequest,
    ),
}


def get_tool_schemas() -> dict[str, dict[str, Any]]:
    """Get all MCP tool schemas."""
    return {
        name: {
            "name": name,
            "description": description,
            "inputSchema": model.model_json_schema(),
        }
        for name, (description, model) in TOOLS.items()
    }
