"""Pydantic schemas for audit logging."""

from enum import Enum

from pydantic import BaseModel, Field


class AuditStatus(str, Enum):
    """Status of a tool invocation."""

    success = "success"
    error = "error"


class AuditRecord(BaseModel):
    """One audited tool invocation, emitted as a structured log event.

    Attributes:
        request_id: Correlation ID for tracing.
        tool_name: Which tool was invoked.
        transport: Channel the call arrived on.
        status: Outcome of the invocation.
        duration_ms: Call duration in milliseconds.
        error_code: Error code if failed.
    """

    request_id: str
    tool_name: str
    transport: str
    status: AuditStatus
    duration_ms: int = Field(ge=0)
    error_code: str | None = None
