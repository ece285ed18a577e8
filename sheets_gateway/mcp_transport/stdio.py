"""Newline-delimited JSON-RPC transport over stdin/stdout."""

import json
import sys
from typing import AsyncIterator, Awaitable, Callable

import anyio
from structlog import get_logger

from sheets_gateway.config import Settings, get_settings
from sheets_gateway.gateway.service import ToolGateway

from .schemas import MCPJSONRPCResponse
from .service import handle_message

logger = get_logger(__name__)

LineReader = Callable[[], AsyncIterator[str]]
LineWriter = Callable[[str], Awaitable[None]]


async def _stdin_lines() -> AsyncIterator[str]:
    stdin = anyio.wrap_file(sys.stdin)
    async for line in stdin:
        yield line


async def _stdout_write(text: str) -> None:
    stdout = anyio.wrap_file(sys.stdout)
    await stdout.write(text)
    await stdout.flush()


class StdioTransport:
    """Serves JSON-RPC messages, one per line, until the input ends.

    Each request is handled in its own task so calls may interleave.
    A capacity limiter bounds the number of in-flight requests and a lock
    keeps every response on a line of its own. Only protocol messages are
    written to the output stream.

    Args:
        gateway: Tool gateway to dispatch through.
        settings: Application settings.
        max_concurrent_calls: In-flight request bound; defaults to the setting.
        reader: Async line source; defaults to stdin.
        writer: Async text sink; defaults to stdout.
    """

    def __init__(
        self,
        gateway: ToolGateway,
        settings: Settings | None = None,
        max_concurrent_calls: int | None = None,
        reader: LineReader | None = None,
        writer: LineWriter | None = None,
    ) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()
        self._limiter = anyio.CapacityLimiter(
            max_concurrent_calls or self._settings.MAX_CONCURRENT_CALLS
        )
        self._write_lock = anyio.Lock()
        self._reader = reader or _stdin_lines
        self._writer = writer or _stdout_write

    async def serve(self) -> None:
        """Read lines until EOF, then wait for in-flight requests to finish."""
        logger.info("stdio_transport_started", max_concurrent_calls=self._limiter.total_tokens)
        async with anyio.create_task_group() as tg:
            async for line in self._reader():
                line = line.strip()
                if not line:
                    continue
                tg.start_soon(self._handle_line, line)
        logger.info("stdio_transport_stopped")

    async def _handle_line(self, line: str) -> None:
        async with self._limiter:
            response = await handle_message(self._gateway, line, self._settings)
        if response is not None:
            await self.send(response)

    async def send(self, response: MCPJSONRPCResponse) -> None:
        text = json.dumps(response.to_wire(), ensure_ascii=False, default=str)
        async with self._write_lock:
            await self._writer(text + "\n")


async def serve_stdio(gateway: ToolGateway, settings: Settings | None = None) -> None:
    """Serve the gateway over stdio and close its backend afterwards."""
    try:
        await StdioTransport(gateway, settings).serve()
    finally:
        await gateway.aclose()
