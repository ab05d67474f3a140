"""Tests for UnifiedLogger."""

from __future__ import annotations

import json
import logging

import pytest
from structlog.contextvars import get_contextvars
from structlog.testing import capture_logs

from jirawalk.core.logger import LogConfig, LogFormat, UnifiedLogger
from jirawalk.core.logging import LogEvents, StructlogDiagnosticSink


@pytest.fixture(autouse=True)
def reset_root_handlers():
    """Ensure handlers installed by ``configure`` do not leak between tests."""

    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)
    UnifiedLogger.reset()


def _lines(err: str) -> list[str]:
    return [line for line in err.splitlines() if line.strip()]


def test_json_lines_are_written_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    UnifiedLogger.configure(LogConfig(level="INFO"))
    log = UnifiedLogger.get("jirawalk.tests").bind(component="tests")

    log.info(LogEvents.WALKER_PAGE_FETCHED, page_index=0, issues_count=5)

    captured = capsys.readouterr()
    assert captured.out == ""
    (line,) = _lines(captured.err)
    record = json.loads(line)
    assert record["message"] == "walker.page.fetched"
    assert record["level"] == "info"
    assert record["component"] == "tests"
    assert record["issues_count"] == 5
    assert "timestamp" in record


def test_secrets_are_redacted(capsys: pytest.CaptureFixture[str]) -> None:
    UnifiedLogger.configure(LogConfig(level="INFO"))
    log = UnifiedLogger.get("jirawalk.tests")

    log.warning("config.loaded", api_token="secret123", authorization="Basic abc")

    err = capsys.readouterr().err
    assert "secret123" not in err
    assert "Basic abc" not in err
    assert "***REDACTED***" in err


def test_level_filters_debug_events(capsys: pytest.CaptureFixture[str]) -> None:
    UnifiedLogger.configure(LogConfig(level="WARNING"))
    log = UnifiedLogger.get("jirawalk.tests")

    log.debug(LogEvents.WALKER_PASS_STARTED)
    log.info(LogEvents.HTTP_REQUEST_COMPLETED)
    log.warning(LogEvents.WALKER_FETCH_FAILED, error="boom")

    lines = _lines(capsys.readouterr().err)
    assert len(lines) == 1
    assert json.loads(lines[0])["message"] == "walker.fetch.failed"


def test_key_value_format(capsys: pytest.CaptureFixture[str]) -> None:
    UnifiedLogger.configure(LogConfig(level="INFO", format=LogFormat.KEY_VALUE))

    UnifiedLogger.get("jirawalk.tests").bind(component="walker").info(LogEvents.WALKER_PASS_EXHAUSTED, pages=2)

    (line,) = _lines(capsys.readouterr().err)
    assert line.startswith("timestamp=")
    assert "level='info' component='walker' message='walker.pass.exhausted'" in line
    assert "pages=2" in line


def test_scoped_context_is_restored() -> None:
    UnifiedLogger.bind(run_id="outer")

    with UnifiedLogger.scoped(run_id="inner", jql="project = PRJ"):
        inside = dict(get_contextvars())
    outside = dict(get_contextvars())

    assert inside == {"run_id": "inner", "jql": "project = PRJ"}
    assert outside == {"run_id": "outer"}


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported log level"):
        UnifiedLogger.configure(LogConfig(level="CHATTY"))


def test_structlog_diagnostic_sink_emits_warning() -> None:
    with capture_logs() as logs:
        StructlogDiagnosticSink().write("502 Server Error")

    (entry,) = logs
    assert entry["event"] == LogEvents.WALKER_FETCH_FAILED
    assert entry["error"] == "502 Server Error"
    assert entry["log_level"] == "warning"


def test_log_event_names_are_dotted() -> None:
    assert LogEvents.HTTP_REQUEST_UNAUTHORIZED.value == "http.request.unauthorized"
    assert LogEvents.CLI_RUN_START == "cli.run.start"
    assert LogEvents.HTTP_RATE_LIMITER_WAIT == "http.rate.limiter.wait"


def test_unconfigured_logging_keeps_stdout_clean(
    capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    log = UnifiedLogger.get("jirawalk.tests")

    log.debug(LogEvents.WALKER_PAGE_FETCHED, page_index=0)
    log.warning(LogEvents.WALKER_FETCH_FAILED, error="boom")

    assert capsys.readouterr().out == ""
    assert "walker.fetch.failed" in caplog.text
    assert "walker.page.fetched" not in caplog.text
    assert "LogEvents." not in caplog.text
