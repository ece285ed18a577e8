"""MCP transport module - JSON-RPC over stdio and HTTP."""

from .exceptions import TransportFault
from .schemas import MCPErrorCodes, MCPJSONRPCRequest, MCPJSONRPCResponse
from .service import handle_message
from .stdio import StdioTransport, serve_stdio

__all__ = [
    "TransportFault",
    "MCPErrorCodes",
    "MCPJSONRPCRequest",
    "MCPJSONRPCResponse",
    "handle_message",
    "StdioTransport",
    "serve_stdio",
]
