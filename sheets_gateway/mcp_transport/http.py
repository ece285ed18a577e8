"""HTTP transport: JSON-RPC messages posted to a single endpoint."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from sheets_gateway.config import Settings, get_settings
from sheets_gateway.dependencies import get_gateway
from sheets_gateway.gateway.service import ToolGateway

from .schemas import MCPErrorCodes, MCPJSONRPCResponse
from .service import handle_message


router = APIRouter(prefix="", tags=["mcp"])


@router.post("/mcp", operation_id="mcp_endpoint_post")
async def mcp_post_endpoint(
    request: Request,
    gateway: Annotated[ToolGateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Handle one JSON-RPC 2.0 message."""
    raw: Any = await request.body()
    if not raw:
        response = MCPJSONRPCResponse.failure(None, MCPErrorCodes.INVALID_REQUEST, "Empty request body")
        return JSONResponse(content=response.to_wire())

    response = await handle_message(gateway, raw, settings)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(content=response.to_wire())
