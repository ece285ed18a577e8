"""Tests for the newline-delimited stdio transport."""

import asyncio
import json

import pytest

from sheets_gateway.gateway.service import ToolGateway
from sheets_gateway.mcp_transport.stdio import StdioTransport, serve_stdio


def _lines(*messages):
    async def reader():
        for message in messages:
            yield message if isinstance(message, str) else json.dumps(message)
            yield "\n"

    return reader


class Collector:
    def __init__(self) -> None:
        self.chunks: list[str] = []

    async def __call__(self, text: str) -> None:
        self.chunks.append(text)

    @property
    def messages(self) -> list[dict]:
        return [json.loads(chunk) for chunk in self.chunks]


@pytest.mark.asyncio
async def test_round_trip(fake_backend, test_settings):
    """Requests in, one response line per request out."""
    writer = Collector()
    transport = StdioTransport(
        ToolGateway(fake_backend),
        settings=test_settings,
        reader=_lines(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
            {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "list", "arguments": {}}},
        ),
        writer=writer,
    )

    await transport.serve()

    responses = {message["id"]: message for message in writer.messages}
    assert set(responses) == {1, 2, 3}
    assert responses[1]["result"]["serverInfo"]["name"] == "google-sheets-manager"
    assert len(responses[2]["result"]["tools"]) == 15
    assert responses[3]["result"]["isError"] is False
    assert all(chunk.endswith("\n") and chunk.count("\n") == 1 for chunk in writer.chunks)


@pytest.mark.asyncio
async def test_malformed_line_keeps_serving(fake_backend, test_settings):
    """A bad line is answered and serving continues."""
    writer = Collector()
    transport = StdioTransport(
        ToolGateway(fake_backend),
        settings=test_settings,
        reader=_lines("{broken", {"jsonrpc": "2.0", "id": 5, "method": "ping"}),
        writer=writer,
    )

    await transport.serve()

    codes = [message.get("error", {}).get("code") for message in writer.messages]
    assert -32700 in codes
    assert any(message.get("id") == 5 and message.get("result") == {} for message in writer.messages)


@pytest.mark.asyncio
async def test_concurrent_requests_bounded(fake_backend, test_settings):
    """In-flight calls never exceed the concurrency limit."""
    active = 0
    peak = 0

    async def slow_get_values(spreadsheet_id, cell_range):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return await type(fake_backend).get_values(fake_backend, spreadsheet_id, cell_range)

    fake_backend.get_values = slow_get_values
    for index in range(6):
        fake_backend.values[(f"s{index}", "A1")] = [[index]]

    writer = Collector()
    transport = StdioTransport(
        ToolGateway(fake_backend),
        settings=test_settings,
        max_concurrent_calls=2,
        reader=_lines(*[
            {
                "jsonrpc": "2.0",
                "id": index,
                "method": "tools/call",
                "params": {"name": "get_values", "arguments": {"spreadsheetId": f"s{index}", "range": "A1"}},
            }
            for index in range(6)
        ]),
        writer=writer,
    )

    await transport.serve()

    assert peak <= 2
    for message in writer.messages:
        payload = json.loads(message["result"]["content"][0]["text"])
        assert payload["values"] == [[message["id"]]]


@pytest.mark.asyncio
async def test_serve_stdio_closes_gateway(fake_backend, test_settings, monkeypatch):
    """Test gateway is closed at EOF."""
    monkeypatch.setattr("sheets_gateway.mcp_transport.stdio._stdin_lines", _lines())

    await serve_stdio(ToolGateway(fake_backend), test_settings)

    assert fake_backend.closed is True
