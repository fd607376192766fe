# -*- coding: utf-8 -*-
"""Location: ./errorthrottle/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

errorthrottle configuration settings.
This module defines the default rate limiting settings using Pydantic.
They are loaded from ``ERRORTHROTTLE_*`` environment variables (or a ``.env``
file) with sensible defaults.

Ranges are not validated: ``max_reports_per_window`` must be at least 1 and
both durations must be positive.
"""

# Standard
from functools import lru_cache

# Third-Party
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Default settings for error report rate limiting."""

    model_config = SettingsConfigDict(env_prefix="ERRORTHROTTLE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    max_reports_per_window: int = Field(default=5, description="Reports admitted per fingerprint per window")
    window_hours: float = Field(default=1, description="Window length in hours")
    cleanup_interval_minutes: float = Field(default=15, description="Period of the stale entry sweep in minutes")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: A cached instance of the Settings class.

    Examples:
        >>> settings = get_settings()
        >>> isinstance(settings, Settings)
        True
        >>> settings is get_settings()
        True
    """
    return Settings()
