"""Gateway module - tool catalogue, argument validation and dispatch."""

from .schemas import (
    ToolDescriptor,
    ToolCallRequest,
    TextContent,
    ResultEnvelope,
)
from .exceptions import (
    GatewayError,
    UnknownToolError,
    ArgumentError,
    BackendError,
)
from .catalogue import TOOL_CATALOGUE, list_tools
from .service import TOOL_ROUTES, ToolGateway, generate_request_id


__all__ = [
    # Schemas
    "ToolDescriptor",
    "ToolCallRequest",
    "TextContent",
    "ResultEnvelope",
    # Exceptions
    "GatewayError",
    "UnknownToolError",
    "ArgumentError",
    "BackendError",
    # Catalogue
    "TOOL_CATALOGUE",
    "list_tools",
    # Service
    "TOOL_ROUTES",
    "ToolGateway",
    "generate_request_id",
]
