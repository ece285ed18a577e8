"""Static catalogue of the spreadsheet tools and their input schemas."""

from typing import Any

from .schemas import ToolDescriptor


def _spreadsheet_id(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _values_2d(description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {"type": "array", "items": {}},
        "description": description,
    }


def _value_input_option() -> dict[str, Any]:
    return {
        "type": "string",
        "enum": ["RAW", "USER_ENTERED"],
        "default": "USER_ENTERED",
        "description": "How to interpret the values (RAW or USER_ENTERED)",
    }


def _page_size(description: str = "Number of spreadsheets to return (default: 10)") -> dict[str, Any]:
    return {
        "type": "integer",
        "minimum": 1,
        "maximum": 1000,
        "default": 10,
        "description": description,
    }


def _page_token() -> dict[str, Any]:
    return {"type": "string", "description": "Token for pagination"}


def _build_tools() -> list[dict[str, Any]]:
    return [
        {
            "name": "create",
            "description": "Create a new Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Title of the spreadsheet"},
                    "sheets": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Array of sheet names to create (optional)",
                    },
                },
                "required": ["title"],
                "additionalProperties": False,
            },
        },
        {
            "name": "get",
            "description": "Get a Google Sheet by ID",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to retrieve"),
                    "includeGridData": {
                        "type": "boolean",
                        "default": False,
                        "description": "Whether to include grid data (cell values)",
                    },
                },
                "required": ["spreadsheetId"],
                "additionalProperties": False,
            },
        },
        {
            "name": "update_values",
            "description": "Update values in a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to update"),
                    "range": {"type": "string", "description": 'Range to update (e.g., "Sheet1!A1:B2")'},
                    "values": _values_2d("2D array of values to update"),
                    "valueInputOption": _value_input_option(),
                },
                "required": ["spreadsheetId", "range", "values"],
                "additionalProperties": False,
            },
        },
        {
            "name": "append_values",
            "description": "Append values to a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to update"),
                    "range": {"type": "string", "description": 'Range to append to (e.g., "Sheet1!A1")'},
                    "values": _values_2d("2D array of values to append"),
                    "valueInputOption": _value_input_option(),
                },
                "required": ["spreadsheetId", "range", "values"],
                "additionalProperties": False,
            },
        },
        {
            "name": "get_values",
            "description": "Get values from a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to read"),
                    "range": {"type": "string", "description": 'Range to read (e.g., "Sheet1!A1:B2")'},
                },
                "required": ["spreadsheetId", "range"],
                "additionalProperties": False,
            },
        },
        {
            "name": "clear_values",
            "description": "Clear values from a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to clear"),
                    "range": {"type": "string", "description": 'Range to clear (e.g., "Sheet1!A1:B2")'},
                },
                "required": ["spreadsheetId", "range"],
                "additionalProperties": False,
            },
        },
        {
            "name": "add_sheet",
            "description": "Add a new sheet to an existing spreadsheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to update"),
                    "sheetTitle": {"type": "string", "description": "Title of the new sheet"},
                },
                "required": ["spreadsheetId", "sheetTitle"],
                "additionalProperties": False,
            },
        },
        {
            "name": "delete_sheet",
            "description": "Delete a sheet from a spreadsheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet"),
                    "sheetId": {"type": "integer", "description": "ID of the sheet to delete"},
                },
                "required": ["spreadsheetId", "sheetId"],
                "additionalProperties": False,
            },
        },
        {
            "name": "list",
            "description": "List Google Sheets accessible to the authenticated user",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "pageSize": _page_size(),
                    "pageToken": _page_token(),
                },
                "required": [],
                "additionalProperties": False,
            },
        },
        {
            "name": "delete",
            "description": "Delete a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to delete"),
                },
                "required": ["spreadsheetId"],
                "additionalProperties": False,
            },
        },
        {
            "name": "share",
            "description": "Share a Google Sheet with specific users",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to share"),
                    "emailAddress": {"type": "string", "description": "Email address to share with"},
                    "role": {
                        "type": "string",
                        "enum": ["reader", "writer", "commenter"],
                        "default": "reader",
                        "description": "Role to assign (reader, writer, commenter)",
                    },
                },
                "required": ["spreadsheetId", "emailAddress"],
                "additionalProperties": False,
            },
        },
        {
            "name": "search",
            "description": "Search for Google Sheets by title",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Search query for spreadsheet title"},
                    "pageSize": _page_size("Number of results to return (default: 10)"),
                    "pageToken": _page_token(),
                },
                "required": ["query"],
                "additionalProperties": False,
            },
        },
        {
            "name": "format_cells",
            "description": "Format cells in a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet"),
                    "sheetId": {"type": "integer", "description": "ID of the sheet"},
                    "range": {
                        "type": "object",
                        "description": "Range to format (zero-based, end-exclusive indexes)",
                        "properties": {
                            "startRowIndex": {"type": "integer", "minimum": 0},
                            "endRowIndex": {"type": "integer", "minimum": 0},
                            "startColumnIndex": {"type": "integer", "minimum": 0},
                            "endColumnIndex": {"type": "integer", "minimum": 0},
                        },
                        "required": ["startRowIndex", "endRowIndex", "startColumnIndex", "endColumnIndex"],
                        "additionalProperties": False,
                    },
                    "format": {
                        "type": "object",
                        "description": "Format to apply (a Sheets CellFormat object)",
                    },
                },
                "required": ["spreadsheetId", "sheetId", "range", "format"],
                "additionalProperties": False,
            },
        },
        {
            "name": "verify_connection",
            "description": "Verify connection with Google Sheets API and check credentials",
            "inputSchema": {
                "type": "object",
                "properties": {},
                "required": [],
                "additionalProperties": False,
            },
        },
        {
            "name": "write_to_sheet",
            "description": "Write data with headers and rows to a Google Sheet",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "spreadsheetId": _spreadsheet_id("ID of the spreadsheet to write to"),
                    "sheetName": {"type": "string", "description": "Name of the sheet to write to"},
                    "data": {
                        "type": "object",
                        "description": "Data to write to the sheet",
                        "properties": {
                            "headers": {
                                "type": "array",
                                "items": {"type": "string"},
                                "description": "Array of column headers",
                            },
                            "rows": _values_2d("Array of row data (2D array)"),
                        },
                        "required": ["headers", "rows"],
                        "additionalProperties": False,
                    },
                    "clearExisting": {
                        "type": "boolean",
                        "default": False,
                        "description": (
                            "Whether to clear existing data before writing (default: false). "
                            "If the write fails after the clear, the sheet is left empty."
                        ),
                    },
                },
                "required": ["spreadsheetId", "sheetName", "data"],
                "additionalProperties": False,
            },
        },
    ]


TOOL_CATALOGUE: tuple[ToolDescriptor, ...] = tuple(ToolDescriptor(**tool) for tool in _build_tools())


def list_tools() -> tuple[ToolDescriptor, ...]:
    """Return the full, ordered tool catalogue.

    Every call returns equal descriptors. Each carries its own copy of its
    input schema, so a caller editing one cannot change the catalogue.
    """
    return tuple(tool.model_copy(deep=True) for tool in TOOL_CATALOGUE)
