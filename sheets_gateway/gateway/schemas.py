"""Pydantic schemas for tool descriptors, call arguments and result envelopes."""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolDescriptor(BaseModel):
    """A named operation advertised to the calling agent.

    Attributes:
        name: Unique tool identifier.
        description: Human-readable description.
        inputSchema: JSON-Schema object describing the arguments.
    """

    name: str
    description: str
    inputSchema: dict[str, Any]

    model_config = ConfigDict(frozen=True)


class ToolCallRequest(BaseModel):
    """A single call-tool-by-name request.

    Attributes:
        name: Name of the tool to invoke.
        arguments: Arguments to pass to the tool.
        request_id: Optional request ID for tracing.
    """

    name: str = Field(..., description="Tool to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    request_id: str | None = Field(default=None, description="Optional request ID")


class TextContent(BaseModel):
    """Text content item in a tool result."""

    type: Literal["text"] = "text"
    text: str


class ResultEnvelope(BaseModel):
    """Uniform wrapper returned for every tool call, success or failure.

    Attributes:
        content: A single text block with the serialized outcome.
        isError: True when the call failed.
    """

    content: list[TextContent]
    isError: bool = False

    @classmethod
    def success(cls, payload: Any) -> "ResultEnvelope":
        """Wrap a result payload as pretty-printed JSON text.

        Args:
            payload: Backend result payload.

        Returns:
            ResultEnvelope with isError unset.
        """
        text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> "ResultEnvelope":
        """Wrap an error message.

        Args:
            text: Error text, already prefixed with the tool context.

        Returns:
            ResultEnvelope with isError set.
        """
        return cls(content=[TextContent(text=text)], isError=True)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)


# Tool arguments

class ToolArguments(BaseModel):
    """Base model for tool arguments: camelCase on the wire, unknown fields rejected."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreateArguments(ToolArguments):
    title: str
    sheets: list[str] | None = None


class GetArguments(ToolArguments):
    spreadsheet_id: str
    include_grid_data: bool = False


class RangeArguments(ToolArguments):
    spreadsheet_id: str
    cell_range: str = Field(..., alias="range")


class ValuesWriteArguments(RangeArguments):
    values: list[list[Any]]
    value_input_option: Literal["RAW", "USER_ENTERED"] = "USER_ENTERED"


class AddSheetArguments(ToolArguments):
    spreadsheet_id: str
    sheet_title: str


class DeleteSheetArguments(ToolArguments):
    spreadsheet_id: str
    sheet_id: int


class ListArguments(ToolArguments):
    page_size: int = Field(default=10, ge=1, le=1000)
    page_token: str | None = None


class SpreadsheetArguments(ToolArguments):
    spreadsheet_id: str


class ShareArguments(ToolArguments):
    spreadsheet_id: str
    email_address: str
    role: Literal["reader", "writer", "commenter"] = "reader"


class SearchArguments(ListArguments):
    query: str


class GridRange(ToolArguments):
    """Zero-based, end-exclusive cell rectangle within one sheet."""

    start_row_index: int = Field(..., ge=0)
    end_row_index: int = Field(..., ge=0)
    start_column_index: int = Field(..., ge=0)
    end_column_index: int = Field(..., ge=0)


class FormatCellsArguments(ToolArguments):
    spreadsheet_id: str
    sheet_id: int
    cell_range: GridRange = Field(..., alias="range")
    cell_format: dict[str, Any] = Field(..., alias="format")


class NoArguments(ToolArguments):
    pass


class SheetData(ToolArguments):
    headers: list[str]
    rows: list[list[Any]]


class WriteToSheetArguments(ToolArguments):
    spreadsheet_id: str
    sheet_name: str
    data: SheetData
    clear_existing: bool = False
