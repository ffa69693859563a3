"""Tests for the structlog configuration wrapper.

Kept minimal since structlog's own test suite is comprehensive.
"""

import io
import json
import logging

import structlog

from buildhook.core.logging import _inject_request_id, configure_structlog
from buildhook.core.middleware import _request_id_var


class TestConfigureStructlog:
    def test_configure_does_not_raise_in_debug_mode(self) -> None:
        configure_structlog(debug=True)

    def test_configure_does_not_raise_in_prod_mode(self) -> None:
        configure_structlog(debug=False)

    def test_logger_usable_after_configure(self) -> None:
        configure_structlog(debug=True)
        logger = structlog.get_logger("test")
        logger.info("test message", key="value")

    def test_stdlib_bridge_is_active_after_configure(self) -> None:
        import logging

        configure_structlog(debug=False)
        logging.getLogger("test.stdlib").info("stdlib message")


class TestInjectRequestId:
    def test_adds_request_id_inside_a_request(self) -> None:
        token = _request_id_var.set("req-123")
        try:
            event = _inject_request_id(None, "info", {"event": "x"})
        finally:
            _request_id_var.reset(token)
        assert event["request_id"] == "req-123"

    def test_leaves_event_alone_outside_a_request(self) -> None:
        event = _inject_request_id(None, "info", {"event": "x"})
        assert "request_id" not in event


class TestStdlibRecordsRendered:
    """Module loggers are plain stdlib loggers; their lines must carry the ID."""

    def _log_inside_request(self, debug: bool, request_id: str, message: str) -> str:
        buf = io.StringIO()
        configure_structlog(debug=debug, stream=buf)
        token = _request_id_var.set(request_id)
        try:
            logging.getLogger("buildhook.webhooks.gate").info(message)
        finally:
            _request_id_var.reset(token)
            configure_structlog(debug=False)
        return buf.getvalue()

    def test_json_line_carries_request_id(self) -> None:
        out = self._log_inside_request(False, "delivery-123", "Rejecting unsigned webhook")
        line = next(l for l in out.splitlines() if "Rejecting unsigned webhook" in l)
        data = json.loads(line)
        assert data["event"] == "Rejecting unsigned webhook"
        assert data["request_id"] == "delivery-123"
        assert data["level"] == "info"
        assert data["logger"] == "buildhook.webhooks.gate"

    def test_console_line_carries_request_id(self) -> None:
        out = self._log_inside_request(True, "delivery-456", "Requested builds")
        assert "Requested builds" in out
        assert "delivery-456" in out

    def test_reconfigure_does_not_duplicate_lines(self) -> None:
        buf = io.StringIO()
        configure_structlog(debug=False)
        configure_structlog(debug=False, stream=buf)
        try:
            logging.getLogger("buildhook.builds.dispatcher").info("only once")
        finally:
            configure_structlog(debug=False)
        assert buf.getvalue().count("only once") == 1
