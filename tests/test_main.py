"""
Unit tests for the proxy entrypoint.

Tests verify:
- JsonFormatter emits one JSON object per record, with exceptions.
- configure_logging installs a single JSON handler at the given level.
- The startup config summary lists the effective settings.
- main() serves the app built from the loaded settings.

CHANGELOG:
- 2026-10-12: Initial creation

TODO:
- None
"""

import json
import logging
import sys
from unittest.mock import patch

import pytest

from eg4_proxy.config import ProxySettings
from eg4_proxy.main import JsonFormatter, configure_logging, log_config_summary, main


def _record(msg: str, *args: object, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="eg4_proxy.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestJsonFormatter:
    def test_formats_record_as_json(self) -> None:
        line = JsonFormatter().format(_record("read %s registers", 127))
        entry = json.loads(line)

        assert entry["level"] == "WARNING"
        assert entry["logger"] == "eg4_proxy.test"
        assert entry["msg"] == "read 127 registers"
        assert "ts" in entry
        assert "exception" not in entry

    def test_includes_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed", exc_info=sys.exc_info())

        entry = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestConfigureLogging:
    def test_single_json_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG")
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestStartup:
    def test_log_config_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="eg4_proxy.main"):
            log_config_summary(ProxySettings())
        assert "port=3002" in caplog.text
        assert "api_prefix=/api/eg4" in caplog.text

    def test_main_runs_uvicorn(self) -> None:
        with (
            patch("eg4_proxy.main.configure_logging") as configure,
            patch("eg4_proxy.main.uvicorn.run") as run,
        ):
            main()

        configure.assert_called_once_with("INFO")
        run.assert_called_once()
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 3002
        assert run.call_args.kwargs["log_config"] is None
