"""MCP (Model Context Protocol) server for the course sections service.

This server exposes section management to MCP clients over stdio. Calls are
authenticated with the configured SERVICE_TOKEN unless a tool call passes its
own `token` argument.
"""

import asyncio
import logging

from mcp import McpError
from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import ErrorData, ServerCapabilities, TextContent, Tool

from coursesections import __version__
from coursesections.config import configure_logging, get_settings
from coursesections.mcp.tool_handlers import INTERNAL_ERROR, call_tool_handler
from coursesections.mcp.tool_schemas import get_tool_schemas
from coursesections.storage.database import get_db

logger = logging.getLogger(__name__)

SERVER_NAME = "course-sections"

# Initialize MCP server
app = Server(SERVER_NAME)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List all available MCP tools."""
    return [Tool(**schema) for schema in get_tool_schemas().values()]


@app.call_tool()
async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
    """Handle tool calls."""
    if arguments is None:
        arguments = {}

    db = get_db()

    try:
        # Handlers manage their own database sessions
        return await call_tool_handler(name, arguments, db, get_settings().get_service_token())
    except McpError:
        raise
    except Exception as e:
        # Fallback error handling for unexpected errors
        logger.exception(f"Unexpected error handling tool {name}")
        raise McpError(
            ErrorData(
                code=INTERNAL_ERROR,
                message=f"Internal error: {str(e)}",
            )
        )


async def main():
    """Main entry point for MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=ServerCapabilities(),
            ),
        )


def run():
    """Console script entry point."""
    configure_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
