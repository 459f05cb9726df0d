from __future__ import annotations

import logging
from datetime import date

import pytest

from salud_trends.logging_setup import get_logger, setup_logging
from salud_trends.merge import merge_sources
from salud_trends.model import WEIGHT, Sample


def test_setup_logging_sets_root_level() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(verbose=True)
        assert root.level == logging.DEBUG
        setup_logging()
        assert root.level == logging.INFO
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_engine_logs_degraded_paths(caplog: pytest.LogCaptureFixture) -> None:
    samples = [Sample(day=date(2024, 1, 1), time=None, values={"weight_kg": None})]
    with caplog.at_level(logging.DEBUG):
        assert merge_sources(samples, [], WEIGHT) == []
    assert "merge_dropped_null_samples" in caplog.text


def test_get_logger_is_named() -> None:
    log = get_logger("salud_trends.test")
    log.info("hello", answer=42)
