"""HTTP API for the course sections MCP service using Server-Sent Events (SSE)."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Header
from fastapi.responses import StreamingResponse
from mcp import McpError

from coursesections import __version__
from coursesections.mcp.tool_handlers import INTERNAL_ERROR, METHOD_NOT_FOUND, call_tool_handler
from coursesections.mcp.tool_schemas import get_tool_schemas
from coursesections.storage.database import get_db

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Course Sections MCP Service",
    description="Create, delete, move, rename and configure course sections",
    version=__version__,
)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


def _list_tools() -> list[dict[str, Any]]:
    return [
        {
            "name": tool_def["name"],
            "description": tool_def["description"],
            "inputSchema": tool_def["inputSchema"],
        }
        for tool_def in get_tool_schemas().values()
    ]


async def handle_jsonrpc_request(request: Dict[str, Any], token: Optional[str] = None) -> Dict[str, Any]:
    """Handle JSON-RPC 2.0 request."""
    jsonrpc = request.get("jsonrpc", "2.0")
    request_id = request.get("id")
    method = request.get("method")
    params = request.get("params", {})

    if method == "initialize":
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "result": {
                "protocolVersion": "2024-11-05",
                "capabilities": {},
                "serverInfo": {
                    "name": "course-sections",
                    "version": __version__,
                },
            },
        }
    elif method == "tools/list":
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "result": {"tools": _list_tools()},
        }
    elif method == "tools/call":
        tool_name = params.get("name")
        arguments = params.get("arguments", {})

        try:
            result = await call_tool_handler(tool_name, arguments, get_db(), token)
            return {
                "jsonrpc": jsonrpc,
                "id": request_id,
                "result": {
                    "content": [{"type": "text", "text": item.text} for item in result]
                },
            }
        except McpError as e:
            return {
                "jsonrpc": jsonrpc,
                "id": request_id,
                "error": e.error.model_dump(exclude_none=True),
            }
        except Exception as e:
            logger.exception(f"Error handling tool {tool_name}")
            return {
                "jsonrpc": jsonrpc,
                "id": request_id,
                "error": {
                    "code": INTERNAL_ERROR,
                    "message": f"Internal error: {str(e)}",
                },
            }
    elif method in ("prompts/list", "resources/list"):
        # The service exposes no prompts or resources
        key = method.split("/")[0]
        return {"jsonrpc": jsonrpc, "id": request_id, "result": {key: []}}
    else:
        return {
            "jsonrpc": jsonrpc,
            "id": request_id,
            "error": {
                "code": METHOD_NOT_FOUND,
                "message": f"Method not found: {method}",
            },
        }


@app.post("/mcp/sse")
async def mcp_sse_post(
    request: dict = Body(...),
    authorization: Optional[str] = Header(default=None),
):
    """Server-Sent Events endpoint for MCP (POST)."""
    result = await handle_jsonrpc_request(request, bearer_token(authorization))
    sse_result = f"data: {json.dumps(result)}\n\n"
    return StreamingResponse(content=iter([sse_result]), media_type="text/event-stream")


@app.get("/mcp/sse")
async def mcp_sse_get():
    """Server-Sent Events endpoint for MCP (GET).

    Sends the discovery events (initialize, tools/list, prompts/list,
    resources/list) and then keeps the connection alive.
    """
    async def generate_sse_stream():
        discovery = ["initialize", "tools/list", "prompts/list", "resources/list"]
        for request_id, method in enumerate(discovery, start=1):
            response = await handle_jsonrpc_request(
                {"jsonrpc": "2.0", "id": request_id, "method": method, "params": {}}
            )
            if method == "tools/list":
                logger.info(f"MCP SSE GET: Sending {len(response['result']['tools'])} tools")
            yield f"data: {json.dumps(response)}\n\n"
            await asyncio.sleep(0.1)

        try:
            while True:
                await asyncio.sleep(30)  # Send keepalive every 30 seconds
                yield ": keepalive\n\n"
        except asyncio.CancelledError:
            logger.info("MCP SSE GET: Connection closed by client")
            raise

    return StreamingResponse(
        generate_sse_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "course-sections"}


def run():
    """Console script entry point."""
    import uvicorn

    from coursesections.config import configure_logging, get_settings

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run()
