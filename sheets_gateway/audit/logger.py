"""Audit logging for tool invocations."""

import time
from contextlib import contextmanager
from typing import Iterator

import structlog

from .schemas import AuditRecord, AuditStatus

# Configure structured logger
logger = structlog.get_logger("audit")


class AuditContext:
    """Tracks timing and outcome of a single tool invocation.

    Attributes:
        request_id: Correlation ID for tracing.
        tool_name: Which tool is being invoked.
        transport: Channel the call arrived on.
        start_time: When the invocation started.
        status: Final status of the invocation.
        error_code: Error code if failed.
    """

    def __init__(self, request_id: str, tool_name: str, transport: str = "unknown") -> None:
        self.request_id = request_id
        self.tool_name = tool_name
        self.transport = transport
        self.start_time = time.perf_counter()
        self.status = AuditStatus.success
        self.error_code: str | None = None

    def mark_error(self, error_code: str) -> None:
        """Mark the invocation as failed with an error code.

        Args:
            error_code: The error code to record.
        """
        self.status = AuditStatus.error
        self.error_code = error_code

    @property
    def duration_ms(self) -> int:
        """Calculate duration in milliseconds."""
        elapsed = time.perf_counter() - self.start_time
        return int(elapsed * 1000)

    def to_record(self) -> AuditRecord:
        return AuditRecord(
            request_id=self.request_id,
            tool_name=self.tool_name,
            transport=self.transport,
            status=self.status,
            duration_ms=self.duration_ms,
            error_code=self.error_code,
        )


def log_tool_invocation(context: AuditContext) -> None:
    """Emit the audit record for a finished invocation.

    Args:
        context: Audit context with invocation details.
    """
    record = context.to_record()
    log = logger.warning if record.status is AuditStatus.error else logger.info
    log("tool_invocation", **record.model_dump(mode="json"))


@contextmanager
def audit_tool_invocation(
    request_id: str,
    tool_name: str,
    transport: str = "unknown",
) -> Iterator[AuditContext]:
    """Context manager for auditing tool invocations.

    Automatically tracks timing and logs when the context exits.

    Args:
        request_id: Correlation ID for tracing.
        tool_name: Which tool is being invoked.
        transport: Channel the call arrived on.

    Yields:
        AuditContext for marking errors.

    Example:
        with audit_tool_invocation(req_id, "get_values") as ctx:
            if result.is_error:
                ctx.mark_error("BACKEND_ERROR")
    """
    context = AuditContext(request_id, tool_name, transport=transport)
    try:
        yield context
    finally:
        log_tool_invocation(context)
