"""Tests for audit logging."""

from unittest.mock import patch

import pytest

from sheets_gateway.audit import AuditContext, AuditStatus, audit_tool_invocation


class TestAuditContext:
    def test_defaults_to_success(self):
        """A fresh context records success."""
        context = AuditContext("req-1", "get_values")

        assert context.status == AuditStatus.success
        assert context.error_code is None
        assert context.duration_ms >= 0

    def test_mark_error(self):
        """mark_error flips the status and keeps the code."""
        context = AuditContext("req-1", "get_values", transport="stdio")
        context.mark_error("BACKEND_ERROR")

        record = context.to_record()
        assert record.status == AuditStatus.error
        assert record.error_code == "BACKEND_ERROR"
        assert record.transport == "stdio"


class TestAuditToolInvocation:
    def test_logs_success(self):
        """A clean exit emits one info event."""
        with patch("sheets_gateway.audit.logger.logger") as mock_logger:
            with audit_tool_invocation("req-1", "create", transport="http"):
                pass

        mock_logger.info.assert_called_once()
        event, = mock_logger.info.call_args.args
        fields = mock_logger.info.call_args.kwargs
        assert event == "tool_invocation"
        assert fields["request_id"] == "req-1"
        assert fields["tool_name"] == "create"
        assert fields["status"] == "success"
        assert fields["error_code"] is None

    def test_logs_error_as_warning(self):
        """Failed invocations are logged at warning level."""
        with patch("sheets_gateway.audit.logger.logger") as mock_logger:
            with audit_tool_invocation("req-2", "get") as context:
                context.mark_error("UNKNOWN_TOOL")

        mock_logger.info.assert_not_called()
        fields = mock_logger.warning.call_args.kwargs
        assert fields["status"] == "error"
        assert fields["error_code"] == "UNKNOWN_TOOL"

    def test_logs_even_when_body_raises(self):
        """The event is emitted even if the body raises."""
        with patch("sheets_gateway.audit.logger.logger") as mock_logger:
            with pytest.raises(RuntimeError):
                with audit_tool_invocation("req-3", "get"):
                    raise RuntimeError("boom")

        mock_logger.info.assert_called_once()
