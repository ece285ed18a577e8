"""Async REST client for the Google Sheets v4 and Drive v3 APIs."""

from typing import Any
from urllib.parse import quote

import httpx

from sheets_gateway.auth.credentials import RequestAuthorizer

from .exceptions import SheetsAPIError


DEFAULT_SHEETS_BASE_URL = "https://sheets.googleapis.com/v4"
DEFAULT_DRIVE_BASE_URL = "https://www.googleapis.com/drive/v3"


def encode_range(cell_range: str) -> str:
    """Percent-encode an A1 range for use as a URL path segment."""
    return quote(cell_range, safe="")


def parse_api_error(response: httpx.Response) -> SheetsAPIError:
    """Build a SheetsAPIError from a failed Google API response.

    Handles the standard ``{"error": {"code", "message", "status",
    "details"}}`` body, the OAuth ``{"error", "error_description"}`` body,
    and non-JSON bodies.

    Args:
        response: The HTTP response with status >= 400.

    Returns:
        The exception describing the failure.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return SheetsAPIError(
            status_code=response.status_code,
            message=error.get("message") or response.reason_phrase,
            status=error.get("status"),
            details=error.get("details"),
        )
    if isinstance(error, str):
        return SheetsAPIError(
            status_code=response.status_code,
            message=body.get("error_description") or error,
            status=error,
        )
    return SheetsAPIError(
        status_code=response.status_code,
        message=response.text[:200] or response.reason_phrase,  # Truncate for safety
    )


class SheetsClient:
    """Authenticated handle for the Sheets and Drive REST endpoints.

    The client is shared by all calls and holds no per-call state.

    Attributes:
        project_id: Google Cloud project id reported by verify_connection.
    """

    def __init__(
        self,
        authorizer: RequestAuthorizer,
        http_client: httpx.AsyncClient,
        sheets_base_url: str = DEFAULT_SHEETS_BASE_URL,
        drive_base_url: str = DEFAULT_DRIVE_BASE_URL,
        project_id: str | None = None,
    ) -> None:
        self._authorizer = authorizer
        self._http = http_client
        self._sheets_base_url = sheets_base_url.rstrip("/")
        self._drive_base_url = drive_base_url.rstrip("/")
        self.project_id = project_id

    @property
    def auth_type(self) -> str:
        return self._authorizer.auth_type

    async def request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> dict[str, Any]:
        """Send one authorized request and decode its JSON body.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            params: Query parameters; None values are dropped.
            json: Optional JSON request body.

        Returns:
            Decoded JSON body, or an empty dict for empty responses.

        Raises:
            SheetsAPIError: If the API responds with status >= 400.
            CredentialError: If an access token cannot be obtained.
            httpx.HTTPError: On timeouts and transport failures.
        """
        headers, auth_params = await self._authorizer.authorize()
        query = {key: value for key, value in (params or {}).items() if value is not None}
        query.update(auth_params)

        response = await self._http.request(
            method,
            url,
            params=query,
            json=json,
            headers=headers,
        )

        if response.status_code >= 400:
            raise parse_api_error(response)
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise SheetsAPIError(response.status_code, "Invalid JSON response from API") from exc
        if not isinstance(body, dict):
            raise SheetsAPIError(response.status_code, "Invalid JSON response from API")
        return body

    async def sheets(self, method: str, path: str = "", **kwargs: Any) -> dict[str, Any]:
        """Call ``{sheets_base}/spreadsheets{path}``."""
        return await self.request(method, f"{self._sheets_base_url}/spreadsheets{path}", **kwargs)

    async def drive(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Call ``{drive_base}{path}``."""
        return await self.request(method, f"{self._drive_base_url}{path}", **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()
        self._authorizer.close()
