# -*- coding: utf-8 -*-
"""Location: ./errorthrottle/hooks.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Adapters that plug a ``RateLimiter`` into error reporting pipelines.

``create_before_send`` produces a pre-send hook with the ``(event, hint)``
signature used by the Sentry SDK::

    limiter = RateLimiter()
    sentry_sdk.init(dsn=..., before_send=create_before_send(limiter))

``RateLimitFilter`` applies the same limiter to ``logging`` records that carry
exception info.
"""

# Standard
import logging
from typing import Any, Callable, Optional

# First-Party
from errorthrottle.services.fingerprint import event_from_exception
from errorthrottle.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def create_before_send(rate_limiter: RateLimiter) -> Callable[..., Optional[Any]]:
    """Wrap a limiter as a pre-send hook.

    The hook returns the event unchanged when admitted and ``None`` when
    dropped. If the limiter itself fails, the event is passed through.

    Args:
        rate_limiter: Limiter that makes the decision.

    Returns:
        Callable[..., Optional[Any]]: ``before_send(event, hint=None)``.

    Examples:
        >>> limiter = RateLimiter({"max_reports_per_window": 1}, auto_start=False)
        >>> before_send = create_before_send(limiter)
        >>> event = {"message": "boom"}
        >>> before_send(event, {}) is event
        True
        >>> before_send(event, {}) is None
        True
        >>> limiter.destroy()
    """

    def before_send(event: Any, hint: Optional[Any] = None) -> Optional[Any]:  # pylint: disable=unused-argument
        try:
            admitted = rate_limiter.should_report(event)
        except Exception as e:  # pylint: disable=broad-except
            logger.warning(f"Error rate limiter failed, passing event through: {e}", exc_info=True)
            return event
        return event if admitted else None

    return before_send


class RateLimitFilter(logging.Filter):
    """Logging filter that throttles duplicate exception records.

    Records without ``exc_info`` always pass. Records with it are converted to
    an event via ``event_from_exception`` and passed through the limiter; the
    log message is not part of the fingerprint.

    Examples:
        >>> limiter = RateLimiter({"max_reports_per_window": 1}, auto_start=False)
        >>> flt = RateLimitFilter(limiter)
        >>> plain = logging.LogRecord("app", logging.INFO, __file__, 1, "hello", None, None)
        >>> flt.filter(plain), flt.filter(plain)
        (True, True)
        >>> limiter.destroy()
    """

    def __init__(self, rate_limiter: RateLimiter, name: str = "") -> None:
        """Initialize the filter.

        Args:
            rate_limiter: Limiter that makes the decision.
            name: Logger name restriction, as for ``logging.Filter``.
        """
        super().__init__(name)
        self.rate_limiter = rate_limiter

    def filter(self, record: logging.LogRecord) -> bool:
        """Decide whether a record should be emitted.

        Args:
            record: Record being logged.

        Returns:
            bool: False when the record's exception is over its cap.
        """
        if not super().filter(record):
            return False
        exc = record.exc_info[1] if isinstance(record.exc_info, tuple) else None
        if exc is None:
            return True
        return self.rate_limiter.should_report(event_from_exception(exc))
