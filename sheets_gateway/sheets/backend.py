"""Spreadsheet operations exposed to the tool gateway.

Every operation performs its remote call(s) through a shared SheetsClient
and returns a BackendResult. Remote and transport failures are caught here
and reported as failures; they are not raised.
"""

from datetime import datetime, timezone
from typing import Any

import httpx
from structlog import get_logger

from sheets_gateway.auth.credentials import RequestAuthorizer
from sheets_gateway.auth.exceptions import CredentialError
from sheets_gateway.auth.models import AuthMode
from sheets_gateway.config import Settings

from .client import SheetsClient, encode_range
from .exceptions import SheetsAPIError
from .results import BackendResult

logger = get_logger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
FILE_LIST_FIELDS = "nextPageToken, files(id, name, createdTime, modifiedTime, webViewLink)"
DEFAULT_VALUE_INPUT_OPTION = "USER_ENTERED"
DEFAULT_PAGE_SIZE = 10

# Failures the operations normalize into BackendResult.failure
BACKEND_FAULTS = (SheetsAPIError, CredentialError, httpx.HTTPError)


def spreadsheet_url(spreadsheet_id: str) -> str:
    return f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"


def quote_sheet_name(sheet_name: str) -> str:
    """Quote a sheet title for A1 notation (``My 'Sheet'`` -> ``'My ''Sheet'''``)."""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'"


def escape_query_literal(value: str) -> str:
    """Escape a value for a single-quoted Drive query string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def failure_from_exception(action: str, exc: Exception) -> BackendResult:
    """Convert a caught backend fault into a failed result.

    Args:
        action: Description of what was being attempted, used as prefix.
        exc: The caught exception.

    Returns:
        BackendResult carrying the failure.
    """
    logger.warning("backend_operation_failed", action=action, error=str(exc), error_type=type(exc).__name__)

    if isinstance(exc, SheetsAPIError):
        return BackendResult.failure(
            message=f"{action}: {exc.message}",
            code=exc.status or exc.status_code,
            details=exc.details,
        )
    if isinstance(exc, CredentialError):
        return BackendResult.failure(message=f"{action}: {exc.message}", code=exc.code)
    if isinstance(exc, httpx.TimeoutException):
        return BackendResult.failure(message=f"{action}: request timed out", code="BACKEND_TIMEOUT")
    return BackendResult.failure(message=f"{action}: {exc}", code="BACKEND_UNAVAILABLE")


class SheetsBackend:
    """The set of spreadsheet operations, one coroutine per action."""

    def __init__(self, client: SheetsClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, auth: AuthMode) -> "SheetsBackend":
        """Build a backend with its own HTTP client from application settings.

        Args:
            settings: Loaded application settings.
            auth: Selected auth mode.

        Returns:
            A ready-to-use SheetsBackend.
        """
        authorizer = RequestAuthorizer(auth, token_uri=settings.OAUTH_TOKEN_URI)
        http_client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT_SECONDS)
        client = SheetsClient(
            authorizer=authorizer,
            http_client=http_client,
            sheets_base_url=settings.SHEETS_API_BASE_URL,
            drive_base_url=settings.DRIVE_API_BASE_URL,
            project_id=settings.GOOGLE_CLOUD_PROJECT_ID,
        )
        return cls(client)

    @property
    def auth_type(self) -> str:
        return self._client.auth_type

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_spreadsheet(self, title: str, sheets: list[str] | None = None) -> BackendResult:
        """Create a spreadsheet, optionally with named sheets."""
        resource: dict[str, Any] = {"properties": {"title": title}}
        if sheets:
            resource["sheets"] = [{"properties": {"title": name}} for name in sheets]

        try:
            data = await self._client.sheets("POST", json=resource)
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error creating spreadsheet '{title}'", exc)

        spreadsheet_id = data.get("spreadsheetId")
        return BackendResult.ok({
            "spreadsheetId": spreadsheet_id,
            "title": title,
            "url": spreadsheet_url(spreadsheet_id),
            "spreadsheet": data,
        })

    async def get_spreadsheet(self, spreadsheet_id: str, include_grid_data: bool = False) -> BackendResult:
        try:
            data = await self._client.sheets(
                "GET",
                f"/{spreadsheet_id}",
                params={"includeGridData": str(include_grid_data).lower()},
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error getting spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def update_values(
        self,
        spreadsheet_id: str,
        cell_range: str,
        values: list[list[Any]],
        value_input_option: str = DEFAULT_VALUE_INPUT_OPTION,
    ) -> BackendResult:
        try:
            data = await self._client.sheets(
                "PUT",
                f"/{spreadsheet_id}/values/{encode_range(cell_range)}",
                params={"valueInputOption": value_input_option},
                json={"range": cell_range, "values": values},
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error updating values in spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def append_values(
        self,
        spreadsheet_id: str,
        cell_range: str,
        values: list[list[Any]],
        value_input_option: str = DEFAULT_VALUE_INPUT_OPTION,
    ) -> BackendResult:
        try:
            data = await self._client.sheets(
                "POST",
                f"/{spreadsheet_id}/values/{encode_range(cell_range)}:append",
                params={"valueInputOption": value_input_option},
                json={"values": values},
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error appending values to spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> BackendResult:
        try:
            data = await self._client.sheets("GET", f"/{spreadsheet_id}/values/{encode_range(cell_range)}")
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error getting values from spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def clear_values(self, spreadsheet_id: str, cell_range: str) -> BackendResult:
        try:
            data = await self._client.sheets(
                "POST",
                f"/{spreadsheet_id}/values/{encode_range(cell_range)}:clear",
                json={},
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error clearing values in spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def _batch_update(self, spreadsheet_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._client.sheets(
            "POST",
            f"/{spreadsheet_id}:batchUpdate",
            json={"requests": requests},
        )

    async def add_sheet(self, spreadsheet_id: str, sheet_title: str) -> BackendResult:
        try:
            data = await self._batch_update(
                spreadsheet_id,
                [{"addSheet": {"properties": {"title": sheet_title}}}],
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error adding sheet '{sheet_title}' to spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def delete_sheet(self, spreadsheet_id: str, sheet_id: int) -> BackendResult:
        try:
            data = await self._batch_update(spreadsheet_id, [{"deleteSheet": {"sheetId": sheet_id}}])
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error deleting sheet {sheet_id} from spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def format_cells(
        self,
        spreadsheet_id: str,
        sheet_id: int,
        grid_range: dict[str, int],
        cell_format: dict[str, Any],
    ) -> BackendResult:
        """Apply ``userEnteredFormat`` to every cell of a grid range."""
        request = {
            "repeatCell": {
                "range": {"sheetId": sheet_id, **grid_range},
                "cell": {"userEnteredFormat": cell_format},
                "fields": "userEnteredFormat",
            }
        }
        try:
            data = await self._batch_update(spreadsheet_id, [request])
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error formatting cells in spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok(data)

    async def _list_files(self, query: str, page_size: int, page_token: str | None) -> dict[str, Any]:
        data = await self._client.drive(
            "GET",
            "/files",
            params={
                "pageSize": page_size,
                "pageToken": page_token,
                "q": query,
                "fields": FILE_LIST_FIELDS,
            },
        )
        return {
            "spreadsheets": data.get("files", []),
            "nextPageToken": data.get("nextPageToken"),
        }

    async def list_spreadsheets(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: str | None = None,
    ) -> BackendResult:
        try:
            data = await self._list_files(f"mimeType='{SPREADSHEET_MIME_TYPE}'", page_size, page_token)
        except BACKEND_FAULTS as exc:
            return failure_from_exception("Error listing spreadsheets", exc)
        return BackendResult.ok(data)

    async def search_spreadsheets(
        self,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: str | None = None,
    ) -> BackendResult:
        drive_query = (
            f"mimeType='{SPREADSHEET_MIME_TYPE}' and name contains '{escape_query_literal(query)}'"
        )
        try:
            data = await self._list_files(drive_query, page_size, page_token)
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error searching spreadsheets for '{query}'", exc)
        return BackendResult.ok(data)

    async def delete_spreadsheet(self, spreadsheet_id: str) -> BackendResult:
        try:
            await self._client.drive("DELETE", f"/files/{spreadsheet_id}")
        except BACKEND_FAULTS as exc:
            return failure_from_exception(f"Error deleting spreadsheet {spreadsheet_id}", exc)
        return BackendResult.ok({
            "success": True,
            "spreadsheetId": spreadsheet_id,
            "message": f"Spreadsheet {spreadsheet_id} successfully deleted",
        })

    async def share_spreadsheet(
        self,
        spreadsheet_id: str,
        email_address: str,
        role: str = "reader",
    ) -> BackendResult:
        try:
            permission = await self._client.drive(
                "POST",
                f"/files/{spreadsheet_id}/permissions",
                json={"type": "user", "role": role, "emailAddress": email_address},
            )
        except BACKEND_FAULTS as exc:
            return failure_from_exception(
                f"Error sharing spreadsheet {spreadsheet_id} with {email_address}", exc
            )
        return BackendResult.ok({
            "success": True,
            "spreadsheetId": spreadsheet_id,
            "permission": permission,
        })

    async def verify_connection(self) -> BackendResult:
        """Probe Drive with a one-item listing.

        A failed check is still a successful operation: the payload reports
        ``connected: false`` with the error details.
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            data = await self._client.drive(
                "GET",
                "/files",
                params={
                    "pageSize": 1,
                    "q": f"mimeType='{SPREADSHEET_MIME_TYPE}'",
                    "fields": "files(id, name)",
                },
            )
        except BACKEND_FAULTS as exc:
            logger.warning("connection_check_failed", error=str(exc))
            return BackendResult.ok({
                "connected": False,
                "projectId": self._client.project_id,
                "timestamp": timestamp,
                "error": {
                    "message": getattr(exc, "message", str(exc)),
                    "code": getattr(exc, "code", None) or "UNKNOWN_ERROR",
                    "details": getattr(exc, "details", None),
                },
            })

        return BackendResult.ok({
            "connected": True,
            "projectId": self._client.project_id,
            "timestamp": timestamp,
            "details": {
                "authType": self._client.auth_type,
                "apiVersion": "v4",
                "spreadsheetCount": len(data.get("files", [])),
            },
        })

    async def write_to_sheet(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        headers: list[str],
        rows: list[list[Any]],
        clear_existing: bool = False,
    ) -> BackendResult:
        """Write a header row followed by data rows starting at A1.

        When ``clear_existing`` is set the whole sheet is cleared first. The
        two steps are not transactional: if the clear succeeds and the write
        fails, the sheet is left empty and the failure details report
        ``cleared: true``.
        """
        sheet_range = quote_sheet_name(sheet_name)
        cleared = False

        if clear_existing:
            try:
                await self._client.sheets(
                    "POST",
                    f"/{spreadsheet_id}/values/{encode_range(sheet_range)}:clear",
                    json={},
                )
            except BACKEND_FAULTS as exc:
                return failure_from_exception(
                    f"Error clearing sheet '{sheet_name}' in spreadsheet {spreadsheet_id}", exc
                )
            cleared = True

        target = f"{sheet_range}!A1"
        try:
            data = await self._client.sheets(
                "PUT",
                f"/{spreadsheet_id}/values/{encode_range(target)}",
                params={"valueInputOption": DEFAULT_VALUE_INPUT_OPTION},
                json={"range": target, "values": [list(headers), *rows]},
            )
        except BACKEND_FAULTS as exc:
            result = failure_from_exception(
                f"Error writing to sheet '{sheet_name}' in spreadsheet {spreadsheet_id}", exc
            )
            result.error.details = {"cleared": cleared, "stage": "write", "apiDetails": result.error.details}
            return result

        return BackendResult.ok({
            "spreadsheetId": spreadsheet_id,
            "sheetName": sheet_name,
            "cleared": cleared,
            "rowsWritten": len(rows),
            "updatedRange": data.get("updatedRange"),
            "updatedRows": data.get("updatedRows"),
            "updatedColumns": data.get("updatedColumns"),
            "updatedCells": data.get("updatedCells"),
        })
