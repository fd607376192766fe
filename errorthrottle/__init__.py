# -*- coding: utf-8 -*-
"""errorthrottle - fingerprint-based rate limiting for error reports.

Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Decides whether an error-report event should be forwarded to an error-tracking
service or suppressed as a duplicate of one already reported in the current
window.
"""

from errorthrottle.hooks import create_before_send, RateLimitFilter
from errorthrottle.models import ErrorEvent, RateLimiterOptions, RateLimiterStats, ReportDecision, TrackedError
from errorthrottle.services.fingerprint import event_from_exception, fingerprint
from errorthrottle.services.rate_limiter import ErrorRateLimit, RateLimiter

__version__ = "0.1.0"

__all__ = [
    "create_before_send",
    "ErrorEvent",
    "ErrorRateLimit",
    "event_from_exception",
    "fingerprint",
    "RateLimiter",
    "RateLimiterOptions",
    "RateLimiterStats",
    "RateLimitFilter",
    "ReportDecision",
    "TrackedError",
]
