"""MCP tool handlers for executing tool operations."""

import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Generator, Optional

import pydantic
from mcp import McpError
from mcp.types import ErrorData, TextContent

from coursesections.access import AccessControl
from coursesections.exceptions import (
    DatabaseError,
    ErrorCode,
    PermissionDeniedError,
    SectionServiceError,
    ValidationError,
)
from coursesections.mcp.schemas import (
    CreateSectionsRequest,
    DeleteSectionsRequest,
    GetSectionsRequest,
    MoveSectionRequest,
    UpdateSectionFormatOptionsRequest,
    UpdateSectionNamesRequest,
    UpdateSectionsRequest,
)
from coursesections.mcp.serializers import to_text_content
from coursesections.services.section_manager import SectionManager
from coursesections.storage.course_store import CourseStore

logger = logging.getLogger(__name__)

# JSON-RPC error codes
INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
NOT_FOUND = -32001
CONFLICT = -32002
FORBIDDEN = -32003

NOT_FOUND_CODES = {
    ErrorCode.INVALID_COURSE_ID,
    ErrorCode.INVALID_SECTION_NUMBER,
    ErrorCode.SECTION_NOT_FOUND,
}


@contextmanager
def section_manager(db: Any, token: Optional[str]) -> Generator[SectionManager, None, None]:
    """Open a session and build a section manager for the token's principal."""
    with db.session() as session:
        access = AccessControl(session)
        principal = access.authenticate(token)
        yield SectionManager(CourseStore(session), access, principal)


async def handle_create_sections(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle create_sections tool."""
    request = CreateSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        created = manager.create_sections(request.courseid, request.position, request.number)
        return to_text_content(created)


async def handle_delete_sections(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle delete_sections tool."""
    request = DeleteSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        deleted = manager.delete_sections(request.courseid, request.sectionnumbers, request.sectionids)
        return to_text_content(deleted)


async def handle_move_section(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle move_section tool."""
    request = MoveSectionRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        manager.move_section(request.courseid, request.sectionnumber, request.position)
        return to_text_content(None)


async def handle_get_sections(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle get_sections tool."""
    request = GetSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        sections = manager.get_sections(request.courseid, request.sectionnumbers, request.sectionids)
        return to_text_content(sections)


async def handle_update_sections(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle update_sections tool."""
    request = UpdateSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        result = manager.update_sections(request.courseid, [s.to_record() for s in request.sections])
        return to_text_content(result)


async def handle_update_section_names(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle update_section_names tool."""
    request = UpdateSectionNamesRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        result = manager.update_section_names(request.courseid, [s.to_record() for s in request.sections])
        return to_text_content(result)


async def handle_update_section_format_options(
    arguments: dict[str, Any], db: Any, token: Optional[str]
) -> list[TextContent]:
    """Handle update_section_format_options tool."""
    request = UpdateSectionFormatOptionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        result = manager.update_section_format_options(
            request.courseid, [s.to_record() for s in request.sections]
        )
        return to_text_content(result)


async def handle_get_section_names(arguments: dict[str, Any], db: Any, token: Optional[str]) -> list[TextContent]:
    """Handle get_section_names tool."""
    request = GetSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        names = manager.get_section_names(request.courseid, request.sectionnumbers, request.sectionids)
        return to_text_content(names)


async def handle_get_section_format_options(
    arguments: dict[str, Any], db: Any, token: Optional[str]
) -> list[TextContent]:
    """Handle get_section_format_options tool."""
    request = GetSectionsRequest.model_validate(arguments)
    with section_manager(db, request.token or token) as manager:
        options = manager.get_section_format_options(
            request.courseid, request.sectionnumbers, request.sectionids
        )
        return to_text_content(options)


# Tool handler registry
TOOL_HANDLERS: dict[str, Callable[..., Awaitable[list[TextContent]]]] = {
    "create_sections": handle_create_sections,
    "delete_sections": handle_delete_sections,
    "move_section": handle_move_section,
    "get_sections": handle_get_sections,
    "update_sections": handle_update_sections,
    "update_section_names": handle_update_section_names,
    "update_section_format_options": handle_update_section_format_options,
    "get_section_names": handle_get_section_names,
    "get_section_format_options": handle_get_section_format_options,
}


def _error(code: int, message: str, errorcode: str) -> McpError:
    return McpError(ErrorData(code=code, message=message, data={"errorcode": errorcode}))


async def call_tool_handler(
    tool_name: str,
    arguments: dict[str, Any],
    db: Any,
    token: Optional[str] = None,
) -> list[TextContent]:
    """
    Call the appropriate tool handler.

    Args:
        tool_name: Name of the tool to call
        arguments: Tool arguments
        db: Database instance
        token: Service token supplied by the transport, used when the arguments carry none

    Returns:
        List of TextContent with tool execution result

    Raises:
        McpError: If tool name is unknown or handler raises an error
    """
    if tool_name not in TOOL_HANDLERS:
        raise McpError(
            ErrorData(
                code=METHOD_NOT_FOUND,
                message=f"Unknown tool: {tool_name}",
            )
        )

    handler = TOOL_HANDLERS[tool_name]

    try:
        return await handler(arguments, db, token)
    except McpError:
        # Re-raise MCP errors as-is
        raise
    except pydantic.ValidationError as e:
        raise _error(INVALID_PARAMS, f"Validation error: {str(e)}", ErrorCode.INVALID_PARAMETER.value)
    except ValidationError as e:
        raise _error(INVALID_PARAMS, f"Validation error: {str(e)}", e.code.value)
    except PermissionDeniedError as e:
        raise _error(FORBIDDEN, str(e), e.code.value)
    except DatabaseError as e:
        logger.error("Database error in tool %s: %s", tool_name, e)
        raise _error(INTERNAL_ERROR, f"Database error: {str(e)}", e.code.value)
    except SectionServiceError as e:
        code = NOT_FOUND if e.code in NOT_FOUND_CODES else CONFLICT
        raise _error(code, str(e), e.code.value)
    except Exception as e:
        logger.exception(f"Unexpected error handling tool {tool_name}")
        raise McpError(
            ErrorData(
                code=INTERNAL_ERROR,
                message=f"Internal error: {str(e)}",
            )
        )
