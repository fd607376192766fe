# -*- coding: utf-8 -*-
"""Location: ./errorthrottle/models.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Pydantic models for errorthrottle.

The event models mirror the subset of an error-tracking event that the
fingerprinter reads. Every field is optional and unknown keys are kept, so a
full SDK event can be validated into ``ErrorEvent`` without losing data.

Examples:
    >>> event = ErrorEvent.model_validate({"message": "boom", "level": "error"})
    >>> event.message
    'boom'
    >>> event.model_dump(exclude_none=True)
    {'message': 'boom', 'level': 'error'}
    >>> RateLimiterOptions(maxReportsPerWindow=2).window_seconds
    3600.0
"""

# Future
from __future__ import annotations

# Standard
from datetime import datetime
from typing import List, Optional

# Third-Party
from pydantic import BaseModel, ConfigDict, Field

# First-Party
from errorthrottle.config import get_settings, Settings
from errorthrottle.utils.base_models import BaseModelWithConfigDict


class StackFrame(BaseModel):
    """A single stack frame.

    Attributes:
        filename: Source file of the frame.
        lineno: Line number inside ``filename``.
    """

    model_config = ConfigDict(extra="allow")

    filename: Optional[str] = None
    lineno: Optional[int] = None


class Stacktrace(BaseModel):
    """Stack trace of one exception, oldest frame first."""

    model_config = ConfigDict(extra="allow")

    frames: Optional[List[StackFrame]] = None


class ExceptionValue(BaseModel):
    """One exception in an event's exception chain.

    Attributes:
        type: Exception class name (e.g. ``ValueError``).
        value: Exception message.
        stacktrace: Frames leading to the exception.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    value: Optional[str] = None
    stacktrace: Optional[Stacktrace] = None


class ExceptionInfo(BaseModel):
    """Container for the exception chain of an event."""

    model_config = ConfigDict(extra="allow")

    values: Optional[List[ExceptionValue]] = None


class ErrorEvent(BaseModel):
    """Error-report event as handed to a pre-send hook.

    Attributes:
        message: Explicit event message.
        exception: Exception chain, first entry is used for fingerprinting.
    """

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    exception: Optional[ExceptionInfo] = None


class RateLimiterOptions(BaseModelWithConfigDict):
    """Construction options for the rate limiter.

    Accepts snake_case or camelCase keys. Unknown keys are ignored and ranges
    are not validated.

    Attributes:
        max_reports_per_window: Admit cap per window per fingerprint.
        window_hours: Window length in hours.
        cleanup_interval_minutes: Sweeper period in minutes.

    Examples:
        >>> opts = RateLimiterOptions.model_validate({"maxReportsPerWindow": 3, "windowHours": 0.5, "unknown": True})
        >>> opts.max_reports_per_window, opts.window_seconds, opts.cleanup_interval_seconds
        (3, 1800.0, 900.0)
    """

    max_reports_per_window: int = Field(default=5, description="Admit cap per window per fingerprint")
    window_hours: float = Field(default=1, description="Window length in hours")
    cleanup_interval_minutes: float = Field(default=15, description="Sweeper period in minutes")

    @property
    def window_seconds(self) -> float:
        """Window length in seconds.

        Returns:
            float: ``window_hours`` converted to seconds.
        """
        return float(self.window_hours) * 60 * 60

    @property
    def cleanup_interval_seconds(self) -> float:
        """Sweeper period in seconds.

        Returns:
            float: ``cleanup_interval_minutes`` converted to seconds.
        """
        return float(self.cleanup_interval_minutes) * 60

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RateLimiterOptions":
        """Build options from environment-driven settings.

        Args:
            settings: Settings to read; defaults to the cached ``get_settings()``.

        Returns:
            RateLimiterOptions: Options carrying the configured values.
        """
        cfg = settings or get_settings()
        return cls(
            max_reports_per_window=cfg.max_reports_per_window,
            window_hours=cfg.window_hours,
            cleanup_interval_minutes=cfg.cleanup_interval_minutes,
        )


class TrackedError(BaseModelWithConfigDict):
    """Snapshot of one tracked fingerprint."""

    fingerprint: str
    count: int
    first_seen: datetime
    last_seen: datetime


class RateLimiterStats(BaseModelWithConfigDict):
    """Read-only snapshot of the limiter state.

    Examples:
        >>> RateLimiterStats(tracked_errors=0).model_dump(by_alias=True)
        {'trackedErrors': 0, 'errors': []}
    """

    tracked_errors: int
    errors: List[TrackedError] = Field(default_factory=list)


class ReportDecision(BaseModelWithConfigDict):
    """Outcome of evaluating one event.

    Attributes:
        admitted: True when the event should be forwarded.
        fingerprint: Fingerprint the event collapsed to.
        count: Admitted reports in the current window, after this decision.
        remaining: Admits left in the current window.
        reset_in: Seconds until the current window elapses.
    """

    admitted: bool
    fingerprint: str
    count: int
    remaining: int
    reset_in: float
