# -*- coding: utf-8 -*-
"""Location: ./tests/unit/errorthrottle/test_config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Test the configuration module.
"""

# Third-Party
import pytest

# First-Party
from errorthrottle.config import get_settings, Settings
from errorthrottle.models import RateLimiterOptions


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch):
    for name in ("MAX_REPORTS_PER_WINDOW", "WINDOW_HOURS", "CLEANUP_INTERVAL_MINUTES"):
        monkeypatch.delenv(f"ERRORTHROTTLE_{name}", raising=False)
    s = Settings(_env_file=None)
    assert s.max_reports_per_window == 5
    assert s.window_hours == 1
    assert s.cleanup_interval_minutes == 15


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ERRORTHROTTLE_MAX_REPORTS_PER_WINDOW", "10")
    monkeypatch.setenv("ERRORTHROTTLE_WINDOW_HOURS", "0.25")
    monkeypatch.setenv("ERRORTHROTTLE_CLEANUP_INTERVAL_MINUTES", "5")
    s = Settings(_env_file=None)
    assert (s.max_reports_per_window, s.window_hours, s.cleanup_interval_minutes) == (10, 0.25, 5)


def test_settings_from_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("ERRORTHROTTLE_MAX_REPORTS_PER_WINDOW", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("ERRORTHROTTLE_MAX_REPORTS_PER_WINDOW=3\nUNRELATED=1\n")
    s = Settings(_env_file=str(env_file))
    assert s.max_reports_per_window == 3


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_options_ignore_unknown_and_skip_range_checks():
    opts = RateLimiterOptions.model_validate({"maxReportsPerWindow": 0, "windowHours": -1, "colour": "blue"})
    assert opts.max_reports_per_window == 0
    assert opts.window_seconds == -3600.0
    assert not hasattr(opts, "colour")


def test_options_from_cached_settings(monkeypatch):
    monkeypatch.setenv("ERRORTHROTTLE_CLEANUP_INTERVAL_MINUTES", "1")
    opts = RateLimiterOptions.from_settings()
    assert opts.cleanup_interval_seconds == 60.0
