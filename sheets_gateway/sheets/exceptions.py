"""Exceptions raised by the Google Sheets/Drive REST client."""

from typing import Any

from sheets_gateway.auth.exceptions import SheetsGatewayError


class SheetsAPIError(SheetsGatewayError):
    """Raised when a Google API responds with an error status.

    Attributes:
        status_code: HTTP status code of the response.
        status: Canonical Google status string (e.g. ``NOT_FOUND``), if any.
        details: Structured error details from the response body, if any.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        status: str | None = None,
        details: Any | None = None,
    ):
        super().__init__(message=message, code=status or f"HTTP_{status_code}")
        self.status_code = status_code
        self.status = status
        self.details = details
