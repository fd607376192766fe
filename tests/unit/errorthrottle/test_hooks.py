# -*- coding: utf-8 -*-
"""Location: ./tests/unit/errorthrottle/test_hooks.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Tests for the pre-send hook and logging filter adapters.
"""

# Standard
import logging
import sys
from unittest.mock import MagicMock

# Third-Party
import pytest

# First-Party
from errorthrottle.hooks import create_before_send, RateLimitFilter
from errorthrottle.models import ErrorEvent
from errorthrottle.services.rate_limiter import RateLimiter


@pytest.fixture
def limiter():
    rl = RateLimiter({"maxReportsPerWindow": 2}, auto_start=False)
    yield rl
    rl.destroy()


def _event():
    return {"message": "boom", "exception": {"values": [{"type": "ValueError"}]}, "level": "error"}


# --------------------------------------------------------------------------- #
# before_send
# --------------------------------------------------------------------------- #


def test_before_send_passes_then_drops(limiter):
    before_send = create_before_send(limiter)
    event = _event()
    assert before_send(event, {"exc_info": None}) is event
    assert before_send(event, {}) is event
    assert before_send(event, {}) is None


def test_before_send_hint_is_optional(limiter):
    before_send = create_before_send(limiter)
    event = _event()
    assert before_send(event) is event


def test_before_send_returns_event_unchanged(limiter):
    before_send = create_before_send(limiter)
    event = _event()
    snapshot = dict(event)
    result = before_send(event)
    assert result == snapshot


def test_before_send_accepts_models(limiter):
    before_send = create_before_send(limiter)
    event = ErrorEvent.model_validate(_event())
    assert before_send(event) is event


def test_before_send_fails_open(caplog):
    broken = MagicMock()
    broken.should_report.side_effect = RuntimeError("limiter exploded")
    before_send = create_before_send(broken)
    event = _event()
    with caplog.at_level(logging.WARNING, logger="errorthrottle.hooks"):
        assert before_send(event, {}) is event
    assert "limiter exploded" in caplog.text


# --------------------------------------------------------------------------- #
# logging filter
# --------------------------------------------------------------------------- #


def _record(exc_info=None, name="app"):
    return logging.LogRecord(name, logging.ERROR, __file__, 10, "failed", None, exc_info)


def _raise_value_error():
    raise ValueError("bad input")


def test_filter_passes_records_without_exception(limiter):
    flt = RateLimitFilter(limiter)
    assert all(flt.filter(_record()) for _ in range(5))
    assert limiter.get_stats().tracked_errors == 0


def test_filter_throttles_duplicate_exceptions(limiter):
    flt = RateLimitFilter(limiter)
    results = []
    for _ in range(4):
        try:
            _raise_value_error()
        except ValueError:
            results.append(flt.filter(_record(sys.exc_info())))
    assert results == [True, True, False, False]


def test_filter_respects_logger_name(limiter):
    flt = RateLimitFilter(limiter, name="app.worker")
    try:
        _raise_value_error()
    except ValueError:
        info = sys.exc_info()
    assert flt.filter(_record(info, name="other")) is False
    assert flt.filter(_record(info, name="app.worker")) is True


def test_filter_attached_to_logger(limiter, caplog):
    log = logging.getLogger("errorthrottle.tests.filtered")
    flt = RateLimitFilter(limiter)
    log.addFilter(flt)
    try:
        with caplog.at_level(logging.ERROR, logger="errorthrottle.tests.filtered"):
            for _ in range(3):
                try:
                    _raise_value_error()
                except ValueError:
                    log.exception("processing failed")
    finally:
        log.removeFilter(flt)
    assert len([r for r in caplog.records if r.name == "errorthrottle.tests.filtered"]) == 2
