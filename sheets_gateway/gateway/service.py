"""Service layer for the tool gateway: validation, routing and result normalization."""

import json
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError
from structlog import get_logger

from sheets_gateway.audit import audit_tool_invocation
from sheets_gateway.auth.credentials import auth_mode_from_settings
from sheets_gateway.config import Settings
from sheets_gateway.sheets.backend import SheetsBackend
from sheets_gateway.sheets.results import BackendResult

from .catalogue import list_tools
from .exceptions import ArgumentError, BackendError, GatewayError, UnknownToolError
from .schemas import (
    AddSheetArguments,
    CreateArguments,
    DeleteSheetArguments,
    FormatCellsArguments,
    GetArguments,
    ListArguments,
    NoArguments,
    RangeArguments,
    ResultEnvelope,
    SearchArguments,
    ShareArguments,
    SpreadsheetArguments,
    ToolCallRequest,
    ToolDescriptor,
    ValuesWriteArguments,
    WriteToSheetArguments,
)

logger = get_logger(__name__)

MAX_VALIDATION_ERRORS = 10


@dataclass(frozen=True)
class ToolRoute:
    """Binds a tool name to its argument model and backend operation."""

    arguments: type[BaseModel]
    invoke: Callable[[SheetsBackend, Any], Awaitable[BackendResult]]


TOOL_ROUTES: dict[str, ToolRoute] = {
    "create": ToolRoute(
        CreateArguments,
        lambda backend, args: backend.create_spreadsheet(args.title, args.sheets),
    ),
    "get": ToolRoute(
        GetArguments,
        lambda backend, args: backend.get_spreadsheet(args.spreadsheet_id, args.include_grid_data),
    ),
    "update_values": ToolRoute(
        ValuesWriteArguments,
        lambda backend, args: backend.update_values(
            args.spreadsheet_id, args.cell_range, args.values, args.value_input_option
        ),
    ),
    "append_values": ToolRoute(
        ValuesWriteArguments,
        lambda backend, args: backend.append_values(
            args.spreadsheet_id, args.cell_range, args.values, args.value_input_option
        ),
    ),
    "get_values": ToolRoute(
        RangeArguments,
        lambda backend, args: backend.get_values(args.spreadsheet_id, args.cell_range),
    ),
    "clear_values": ToolRoute(
        RangeArguments,
        lambda backend, args: backend.clear_values(args.spreadsheet_id, args.cell_range),
    ),
    "add_sheet": ToolRoute(
        AddSheetArguments,
        lambda backend, args: backend.add_sheet(args.spreadsheet_id, args.sheet_title),
    ),
    "delete_sheet": ToolRoute(
        DeleteSheetArguments,
        lambda backend, args: backend.delete_sheet(args.spreadsheet_id, args.sheet_id),
    ),
    "list": ToolRoute(
        ListArguments,
        lambda backend, args: backend.list_spreadsheets(args.page_size, args.page_token),
    ),
    "delete": ToolRoute(
        SpreadsheetArguments,
        lambda backend, args: backend.delete_spreadsheet(args.spreadsheet_id),
    ),
    "share": ToolRoute(
        ShareArguments,
        lambda backend, args: backend.share_spreadsheet(
            args.spreadsheet_id, args.email_address, args.role
        ),
    ),
    "search": ToolRoute(
        SearchArguments,
        lambda backend, args: backend.search_spreadsheets(
            args.query, args.page_size, args.page_token
        ),
    ),
    "format_cells": ToolRoute(
        FormatCellsArguments,
        lambda backend, args: backend.format_cells(
            args.spreadsheet_id,
            args.sheet_id,
            args.cell_range.model_dump(by_alias=True),
            args.cell_format,
        ),
    ),
    "verify_connection": ToolRoute(
        NoArguments,
        lambda backend, args: backend.verify_connection(),
    ),
    "write_to_sheet": ToolRoute(
        WriteToSheetArguments,
        lambda backend, args: backend.write_to_sheet(
            args.spreadsheet_id,
            args.sheet_name,
            args.data.headers,
            args.data.rows,
            args.clear_existing,
        ),
    ),
}


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())


def format_validation_errors(exc: ValidationError) -> list[dict[str, object]]:
    """Sanitize validation errors for safe responses.

    Args:
        exc: Validation error instance.

    Returns:
        Limited list of simplified error details.
    """
    details: list[dict[str, object]] = []
    for item in exc.errors()[:MAX_VALIDATION_ERRORS]:
        details.append(
            {
                "loc": list(item.get("loc", [])),
                "msg": item.get("msg", "Invalid value"),
                "type": item.get("type", "value_error"),
            }
        )
    return details


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def error_text(tool_name: str, exc: GatewayError) -> str:
    """Render a gateway error as the text of an error envelope.

    Args:
        tool_name: Tool the call was addressed to.
        exc: The error raised while handling the call.

    Returns:
        ``"<tool>: <message>"`` optionally followed by pretty-printed detail.
    """
    text = f"{tool_name}: {exc.message}"
    if isinstance(exc, ArgumentError) and exc.details:
        text += "\n" + _pretty({"code": exc.code, "details": exc.details})
    elif isinstance(exc, BackendError):
        extra = {
            key: value
            for key, value in (("code", exc.backend_code), ("details", exc.detail))
            if value is not None
        }
        if extra:
            text += "\n" + _pretty(extra)
    return text


def parse_arguments(tool_name: str, route: ToolRoute, arguments: dict[str, Any] | None) -> BaseModel:
    """Validate raw call arguments against the tool's argument model.

    Raises:
        ArgumentError: If validation fails.
    """
    try:
        return route.arguments.model_validate(arguments or {})
    except ValidationError as exc:
        raise ArgumentError(tool_name, format_validation_errors(exc)) from exc


class ToolGateway:
    """Routes named tool calls to backend operations and normalizes outcomes.

    Every outcome, including unknown tools, invalid arguments and
    unexpected exceptions, is returned as a ResultEnvelope.
    """

    def __init__(self, backend: SheetsBackend, transport: str = "unknown") -> None:
        self._backend = backend
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: str = "unknown") -> "ToolGateway":
        """Select the auth mode and build the backend from settings.

        Raises:
            ConfigurationError: If no usable credentials are configured.
        """
        auth = auth_mode_from_settings(settings)
        return cls(SheetsBackend.from_settings(settings, auth), transport=transport)

    @property
    def backend(self) -> SheetsBackend:
        return self._backend

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        return list_tools()

    async def aclose(self) -> None:
        await self._backend.aclose()

    async def call(self, request: ToolCallRequest) -> ResultEnvelope:
        """Invoke a tool from a parsed call request."""
        return await self.handle_call(request.name, request.arguments, request_id=request.request_id)

    async def handle_call(
        self,
        tool_name: str,
        arguments: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> ResultEnvelope:
        """Invoke a tool by name.

        Args:
            tool_name: Name of the tool to invoke.
            arguments: Raw arguments from the caller.
            request_id: Optional correlation ID.

        Returns:
            ResultEnvelope with the JSON payload, or isError set on failure.
        """
        request_id = request_id or generate_request_id()

        with audit_tool_invocation(request_id, tool_name, transport=self.transport) as audit_ctx:
            try:
                route = TOOL_ROUTES.get(tool_name)
                if route is None:
                    raise UnknownToolError(tool_name)

                args = parse_arguments(tool_name, route, arguments)
                result = await route.invoke(self._backend, args)
                if result.is_error:
                    raise BackendError(tool_name, result.error)

                return ResultEnvelope.success(result.payload)

            except GatewayError as exc:
                audit_ctx.mark_error(exc.code)
                logger.info(
                    "tool_call_failed",
                    request_id=request_id,
                    tool_name=tool_name,
                    error_code=exc.code,
                    message=exc.message,
                )
                return ResultEnvelope.error(error_text(tool_name, exc))

            except Exception as exc:
                audit_ctx.mark_error("INTERNAL_ERROR")
                logger.exception(
                    "tool_call_crashed",
                    request_id=request_id,
                    tool_name=tool_name,
                )
                return ResultEnvelope.error(f"{tool_name}: {exc}")
