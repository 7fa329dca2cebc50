"""Tests for shared observability logging."""

import logging
import time

import pytest

from hydrater.observability import get_logger


def test_get_logger_formats_utc_timestamps(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fixed = time.struct_time((2026, 3, 14, 9, 26, 53, 5, 73, 0))

    def fake_gmtime(_: float | None = None) -> time.struct_time:
        return fixed

    monkeypatch.setattr(time, "gmtime", fake_gmtime)

    logger = get_logger("hydrater.test.logging")
    logger.warning("Skipping candidate %s", "bob")

    captured = capsys.readouterr()
    assert (
        "2026-03-14T09:26:53+0000 WARNING hydrater.test.logging: Skipping candidate bob"
        in captured.err
    )


def test_get_logger_configures_each_name_once() -> None:
    logger = get_logger("hydrater.test.logging.once")
    again = get_logger("hydrater.test.logging.once")

    assert logger is again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False
