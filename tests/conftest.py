# Test configuration
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from sheets_gateway.auth.credentials import RequestAuthorizer  # noqa: E402
from sheets_gateway.auth.models import ApiKeyAuth  # noqa: E402
from sheets_gateway.config import Settings  # noqa: E402
from sheets_gateway.sheets.backend import SheetsBackend  # noqa: E402
from sheets_gateway.sheets.client import SheetsClient  # noqa: E402
from sheets_gateway.sheets.results import BackendResult  # noqa: E402

SHEETS_BASE = "https://sheets.test/v4"
DRIVE_BASE = "https://drive.test/v3"


class FakeSheetsBackend:
    """In-memory stand-in for SheetsBackend used by gateway tests."""

    auth_type = "API Key"

    def __init__(self) -> None:
        self.values: dict[tuple[str, str], list[list[Any]]] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.rejected: set[str] = set()
        self.closed = False

    def _reject(self, action: str, spreadsheet_id: str) -> BackendResult | None:
        if spreadsheet_id in self.rejected:
            return BackendResult.failure(
                f"Error {action} in spreadsheet {spreadsheet_id}: Requested entity was not found.",
                code="NOT_FOUND",
            )
        return None

    async def aclose(self) -> None:
        self.closed = True

    async def create_spreadsheet(self, title, sheets=None):
        self.calls.append(("create_spreadsheet", (title, sheets)))
        spreadsheet_id = f"id-{title.lower()}"
        return BackendResult.ok({
            "spreadsheetId": spreadsheet_id,
            "title": title,
            "url": f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit",
        })

    async def get_spreadsheet(self, spreadsheet_id, include_grid_data=False):
        self.calls.append(("get_spreadsheet", (spreadsheet_id, include_grid_data)))
        return self._reject("getting spreadsheet", spreadsheet_id) or BackendResult.ok(
            {"spreadsheetId": spreadsheet_id, "includeGridData": include_grid_data}
        )

    async def update_values(self, spreadsheet_id, cell_range, values, value_input_option="USER_ENTERED"):
        self.calls.append(("update_values", (spreadsheet_id, cell_range, values, value_input_option)))
        rejected = self._reject("updating values", spreadsheet_id)
        if rejected:
            return rejected
        self.values[(spreadsheet_id, cell_range)] = values
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "updatedRange": cell_range})

    async def append_values(self, spreadsheet_id, cell_range, values, value_input_option="USER_ENTERED"):
        self.calls.append(("append_values", (spreadsheet_id, cell_range, values, value_input_option)))
        self.values.setdefault((spreadsheet_id, cell_range), []).extend(values)
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "tableRange": cell_range})

    async def get_values(self, spreadsheet_id, cell_range):
        self.calls.append(("get_values", (spreadsheet_id, cell_range)))
        return self._reject("getting values", spreadsheet_id) or BackendResult.ok({
            "range": cell_range,
            "majorDimension": "ROWS",
            "values": self.values.get((spreadsheet_id, cell_range), []),
        })

    async def clear_values(self, spreadsheet_id, cell_range):
        self.calls.append(("clear_values", (spreadsheet_id, cell_range)))
        self.values.pop((spreadsheet_id, cell_range), None)
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "clearedRange": cell_range})

    async def add_sheet(self, spreadsheet_id, sheet_title):
        self.calls.append(("add_sheet", (spreadsheet_id, sheet_title)))
        return BackendResult.ok({"replies": [{"addSheet": {"properties": {"title": sheet_title}}}]})

    async def delete_sheet(self, spreadsheet_id, sheet_id):
        self.calls.append(("delete_sheet", (spreadsheet_id, sheet_id)))
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "replies": [{}]})

    async def format_cells(self, spreadsheet_id, sheet_id, grid_range, cell_format):
        self.calls.append(("format_cells", (spreadsheet_id, sheet_id, grid_range, cell_format)))
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "replies": [{}]})

    async def list_spreadsheets(self, page_size=10, page_token=None):
        self.calls.append(("list_spreadsheets", (page_size, page_token)))
        return BackendResult.ok({"spreadsheets": [], "nextPageToken": None})

    async def search_spreadsheets(self, query, page_size=10, page_token=None):
        self.calls.append(("search_spreadsheets", (query, page_size, page_token)))
        return BackendResult.ok({"spreadsheets": [{"id": "s1", "name": query}], "nextPageToken": None})

    async def delete_spreadsheet(self, spreadsheet_id):
        self.calls.append(("delete_spreadsheet", (spreadsheet_id,)))
        return BackendResult.ok({"success": True, "spreadsheetId": spreadsheet_id})

    async def share_spreadsheet(self, spreadsheet_id, email_address, role="reader"):
        self.calls.append(("share_spreadsheet", (spreadsheet_id, email_address, role)))
        return BackendResult.ok({"success": True, "spreadsheetId": spreadsheet_id})

    async def verify_connection(self):
        self.calls.append(("verify_connection", ()))
        return BackendResult.ok({"connected": True, "projectId": "test-project"})

    async def write_to_sheet(self, spreadsheet_id, sheet_name, headers, rows, clear_existing=False):
        self.calls.append(("write_to_sheet", (spreadsheet_id, sheet_name, headers, rows, clear_existing)))
        return BackendResult.ok({"spreadsheetId": spreadsheet_id, "rowsWritten": len(rows)})


@pytest.fixture
def fake_backend() -> FakeSheetsBackend:
    return FakeSheetsBackend()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        GOOGLE_API_KEY="test-key",
        GOOGLE_CLOUD_PROJECT_ID="test-project",
        SHEETS_API_BASE_URL=SHEETS_BASE,
        DRIVE_API_BASE_URL=DRIVE_BASE,
    )


def make_backend(handler: Callable[[httpx.Request], httpx.Response]) -> SheetsBackend:
    """Build a real SheetsBackend whose HTTP traffic goes to ``handler``."""
    authorizer = RequestAuthorizer(ApiKeyAuth(api_key="test-key"))
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = SheetsClient(
        authorizer=authorizer,
        http_client=http_client,
        sheets_base_url=SHEETS_BASE,
        drive_base_url=DRIVE_BASE,
        project_id="test-project",
    )
    return SheetsBackend(client)
