"""Custom exceptions for the tool dispatch gateway."""

from typing import Any

from sheets_gateway.auth.exceptions import SheetsGatewayError
from sheets_gateway.sheets.results import BackendFailure


class GatewayError(SheetsGatewayError):
    """Base exception for gateway-specific errors."""
    pass


class UnknownToolError(GatewayError):
    """Raised when the requested tool is not in the catalogue.

    Attributes:
        tool_name: Name of the tool that was requested.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            code="UNKNOWN_TOOL"
        )
        self.tool_name = tool_name


class ArgumentError(GatewayError):
    """Raised when call arguments do not match the tool's input schema.

    Attributes:
        tool_name: Tool whose arguments were rejected.
        details: Sanitized validation error details.
    """

    def __init__(self, tool_name: str, details: list[dict[str, Any]] | None = None):
        super().__init__(
            message=f"Invalid arguments for tool '{tool_name}'",
            code="INVALID_ARGUMENTS"
        )
        self.tool_name = tool_name
        self.details = details or []


class BackendError(GatewayError):
    """Raised when a backend operation reports a failure.

    The backend's message, code and details are passed through verbatim.

    Attributes:
        tool_name: Tool whose backend operation failed.
        backend_code: Error code reported by the backend, if any.
        detail: Error detail reported by the backend, if any.
    """

    def __init__(self, tool_name: str, failure: BackendFailure):
        super().__init__(
            message=failure.message,
            code="BACKEND_ERROR"
        )
        self.tool_name = tool_name
        self.backend_code = failure.code
        self.detail = failure.details
