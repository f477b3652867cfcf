from __future__ import annotations

import logging

import pytest

from helper_engine.clock import FixedClock, ManualClock, SystemClock
from helper_engine.diagnostics import debug_enabled, emit_failure


@pytest.mark.parametrize("value, expected", [("1", True), ("TRUE", True), (" on ", True), ("0", False), ("", False)])
def test_debug_enabled_reads_environment(monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
    monkeypatch.setenv("CONFHELPER_DEBUG", value)
    assert debug_enabled() is expected


def test_debug_disabled_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONFHELPER_DEBUG", raising=False)
    assert debug_enabled() is False


def test_emit_failure_logs_exception_with_traceback(caplog: pytest.LogCaptureFixture) -> None:
    try:
        raise ValueError("broken input")
    except ValueError as exc:
        with caplog.at_level(logging.ERROR, logger="helper_engine.diagnostics"):
            emit_failure(exc, "load")

    assert "[Error Handler] [load]" in caplog.text
    assert caplog.records[-1].exc_info is not None


def test_emit_failure_without_context(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="helper_engine.diagnostics"):
        emit_failure("raw text")

    assert "[Error Handler]: 'raw text'" in caplog.text


def test_clocks() -> None:
    assert FixedClock(fixed_ms=5).now_ms() == 5
    assert SystemClock().now_ms() > 1_600_000_000_000

    clock = ManualClock()
    assert clock.advance(10) == 10
    assert clock.now_ms() == 10
    with pytest.raises(ValueError):
        clock.advance(-1)
