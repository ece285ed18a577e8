"""Custom exceptions for the MCP transports."""

from sheets_gateway.auth.exceptions import SheetsGatewayError

from .schemas import MCPErrorCodes


class TransportFault(SheetsGatewayError):
    """Raised when a frame received on a channel cannot be handled.

    Answered with a JSON-RPC error; never fatal to the serving loop.

    Attributes:
        rpc_code: JSON-RPC error code to answer with.
        request_id: ID of the offending request, when it could be read.
    """

    def __init__(
        self,
        message: str,
        rpc_code: int = MCPErrorCodes.INVALID_REQUEST,
        request_id: str | int | None = None,
    ):
        super().__init__(message=message, code="TRANSPORT_FAULT")
        self.rpc_code = rpc_code
        self.request_id = request_id
