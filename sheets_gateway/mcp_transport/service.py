"""Business logic for MCP protocol handlers, shared by every transport."""

import json
from typing import Any

from pydantic import ValidationError
from structlog import get_logger

from sheets_gateway.config import Settings, get_settings
from sheets_gateway.gateway.schemas import ToolCallRequest
from sheets_gateway.gateway.service import ToolGateway, format_validation_errors

from .exceptions import TransportFault
from .schemas import (
    PROTOCOL_VERSION,
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallParams,
    MCPToolListResult,
)

logger = get_logger(__name__)


async def handle_initialize(
    params: MCPInitializeParams,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Handle initialize request.

    Args:
        params: Initialize parameters from client.
        settings: Application settings, for the server name and version.

    Returns:
        Server initialization response.
    """
    settings = settings or get_settings()
    logger.info(
        "client_initialized",
        client_protocol=params.protocolVersion,
        client_info=params.clientInfo,
    )
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {
                "listChanged": False
            }
        },
        "serverInfo": {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
        },
    }


async def handle_tools_list(gateway: ToolGateway) -> MCPToolListResult:
    """Handle tools/list: the full static catalogue."""
    return MCPToolListResult(tools=list(gateway.list_tools()))


async def handle_tools_call(
    gateway: ToolGateway,
    params: MCPToolCallParams,
    request_id: str | int | None = None,
) -> dict[str, Any]:
    """Handle tools/call by delegating to the gateway.

    Tool failures are reported inside the envelope, not as JSON-RPC errors.

    Args:
        gateway: Tool gateway to dispatch through.
        params: Call parameters.
        request_id: JSON-RPC id, reused as the audit correlation id.

    Returns:
        The result envelope as a plain dict.
    """
    call_request = ToolCallRequest(
        name=params.name,
        arguments=params.arguments or {},
        request_id=str(request_id) if request_id is not None else None,
    )
    envelope = await gateway.call(call_request)
    return envelope.model_dump()


def parse_message(raw: str | bytes | Any) -> MCPJSONRPCRequest:
    """Decode a single JSON-RPC message.

    Args:
        raw: A text frame, or an already-decoded JSON value.

    Returns:
        The parsed request.

    Raises:
        TransportFault: If the frame is not valid JSON or not a request object.
    """
    if isinstance(raw, (str, bytes)):
        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise TransportFault(f"Parse error: {exc}", rpc_code=MCPErrorCodes.PARSE_ERROR) from exc
    else:
        body = raw

    if not isinstance(body, dict):
        raise TransportFault("Invalid Request: expected a JSON object")

    try:
        return MCPJSONRPCRequest.model_validate(body)
    except ValidationError as exc:
        request_id = body.get("id")
        if not isinstance(request_id, (str, int)) or isinstance(request_id, bool):
            request_id = None
        raise TransportFault("Invalid Request", request_id=request_id) from exc


async def dispatch_request(
    gateway: ToolGateway,
    request: MCPJSONRPCRequest,
    settings: Settings | None = None,
) -> MCPJSONRPCResponse | None:
    """Route a parsed request to its method handler.

    A request without an id is a notification: it is still handled, but
    nothing is sent back, not even an error.

    Returns:
        The response, or None for notifications.
    """
    response = await _dispatch(gateway, request, settings)
    if request.is_notification:
        return None
    return response


async def _dispatch(
    gateway: ToolGateway,
    request: MCPJSONRPCRequest,
    settings: Settings | None,
) -> MCPJSONRPCResponse | None:
    method = request.method
    params = request.params or {}

    try:
        if method == "initialize":
            init_params = MCPInitializeParams(**params)
            result = await handle_initialize(init_params, settings)
            return MCPJSONRPCResponse(id=request.id, result=result)

        elif method.startswith("notifications/") and request.is_notification:
            return None

        elif method == "ping":
            return MCPJSONRPCResponse(id=request.id, result={})

        elif method == "tools/list":
            result = await handle_tools_list(gateway)
            return MCPJSONRPCResponse(id=request.id, result=result.model_dump())

        elif method == "tools/call":
            call_params = MCPToolCallParams(**params)
            result = await handle_tools_call(gateway, call_params, request_id=request.id)
            return MCPJSONRPCResponse(id=request.id, result=result)

        else:
            return MCPJSONRPCResponse.failure(
                request.id,
                MCPErrorCodes.METHOD_NOT_FOUND,
                f"Method not found: {method}",
            )

    except ValidationError as exc:
        return MCPJSONRPCResponse.failure(
            request.id,
            MCPErrorCodes.INVALID_PARAMS,
            f"Invalid params for {method}",
            data={"details": format_validation_errors(exc)},
        )
    except Exception as exc:
        logger.exception("jsonrpc_internal_error", method=method)
        return MCPJSONRPCResponse.failure(
            request.id,
            MCPErrorCodes.INTERNAL_ERROR,
            f"Internal error: {exc}",
        )


async def handle_message(
    gateway: ToolGateway,
    raw: str | bytes | Any,
    settings: Settings | None = None,
) -> MCPJSONRPCResponse | None:
    """Handle one inbound frame end to end.

    Malformed frames are answered with a JSON-RPC error instead of raising.

    Args:
        gateway: Tool gateway to dispatch through.
        raw: The inbound frame.
        settings: Application settings.

    Returns:
        The response to send, or None when nothing should be sent.
    """
    try:
        request = parse_message(raw)
    except TransportFault as fault:
        logger.warning("transport_fault", message=fault.message, rpc_code=fault.rpc_code)
        return MCPJSONRPCResponse.failure(fault.request_id, fault.rpc_code, fault.message)

    return await dispatch_request(gateway, request, settings)
