# -*- coding: utf-8 -*-
"""Location: ./errorthrottle/services/rate_limiter.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Fingerprint-based rate limiter for error reports.

Each distinct error (see ``errorthrottle.services.fingerprint``) gets a fixed
window anchored at its first sighting. Within that window at most
``max_reports_per_window`` reports are admitted; the rest are dropped. Once the
window has elapsed the next report starts a fresh window.

A background sweeper removes entries that have not been seen for a whole
window. The sweeper is a daemon thread owned by the limiter, independent of
any event loop. Tracker state is guarded by a single lock because reporting
SDKs call their pre-send hooks from arbitrary threads.

Examples:
    >>> now = [0.0]
    >>> limiter = RateLimiter({"maxReportsPerWindow": 2, "windowHours": 1}, clock=lambda: now[0], auto_start=False)
    >>> event = {"message": "x is undefined", "exception": {"values": [{"type": "TypeError"}]}}
    >>> [limiter.should_report(event) for _ in range(3)]
    [True, True, False]
    >>> now[0] = 3601.0
    >>> limiter.should_report(event)
    True
    >>> limiter.get_stats().errors[0].count
    1
    >>> limiter.destroy()
"""

# Standard
import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, Optional, Union

# First-Party
from errorthrottle.models import RateLimiterOptions, RateLimiterStats, ReportDecision, TrackedError
from errorthrottle.services.fingerprint import EventLike, fingerprint

logger = logging.getLogger(__name__)

OptionsLike = Union[RateLimiterOptions, Mapping[str, Any], None]


@dataclass
class ErrorRateLimit:
    """Per-fingerprint counter.

    Attributes:
        count: Reports admitted in the current window.
        first_seen: Epoch seconds of the sighting that opened the window.
        last_seen: Epoch seconds of the most recent sighting, admitted or not.
    """

    count: int
    first_seen: float
    last_seen: float


class RateLimiter:
    """Fixed-window rate limiter keyed by error fingerprint.

    Preconditions (not validated): ``max_reports_per_window >= 1`` and both
    durations are positive.
    """

    def __init__(
        self,
        options: OptionsLike = None,
        *,
        clock: Callable[[], float] = time.time,
        auto_start: bool = True,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            options: ``RateLimiterOptions`` or a mapping of option keys
                (snake_case or camelCase). ``None`` reads ``get_settings()``.
            clock: Returns the current time in epoch seconds.
            auto_start: Start the background sweeper immediately.
        """
        if options is None:
            opts = RateLimiterOptions.from_settings()
        elif isinstance(options, RateLimiterOptions):
            opts = options
        else:
            opts = RateLimiterOptions.model_validate(dict(options))

        self.max_reports_per_window = opts.max_reports_per_window
        self.window_seconds = opts.window_seconds
        self.cleanup_interval = opts.cleanup_interval_seconds
        self._clock = clock
        self._error_counts: Dict[str, ErrorRateLimit] = {}
        self._lock = threading.Lock()
        self._cleanup_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        logger.info(f"RateLimiter initialized: max_reports_per_window={self.max_reports_per_window}, window={self.window_seconds}s, cleanup_interval={self.cleanup_interval}s")

        if auto_start:
            self.start()

    def __enter__(self) -> "RateLimiter":
        """Enter the context.

        Returns:
            RateLimiter: This limiter.
        """
        return self

    def __exit__(self, *exc_info: Any) -> None:
        """Destroy the limiter when leaving the context.

        Args:
            *exc_info: Exception type, value and traceback, if any.
        """
        self.destroy()

    @property
    def is_running(self) -> bool:
        """Whether the background sweeper is active.

        Returns:
            bool: True while the sweeper thread is alive.
        """
        return self._cleanup_thread is not None and self._cleanup_thread.is_alive()

    def start(self) -> None:
        """Start the background sweeper if it is not already running.

        The sweeper is a daemon thread, so it outlives any event loop the
        limiter happened to be created in.
        """
        if self.is_running:
            return

        self._stop_event.clear()
        self._cleanup_thread = threading.Thread(target=self._cleanup_worker, name="ErrorThrottleSweeper", daemon=True)
        self._cleanup_thread.start()
        logger.info("Error throttle cleanup thread started")

    def destroy(self) -> None:
        """Stop the sweeper and forget every tracked error.

        Safe to call repeatedly, from any thread, and when no sweeper was started.
        """
        thread = self._cleanup_thread
        if thread is not None:
            self._stop_event.set()
            if thread is not threading.current_thread():
                thread.join(timeout=1.0)
            self._cleanup_thread = None

        with self._lock:
            self._error_counts.clear()

    async def shutdown(self) -> None:
        """Destroy the limiter without blocking the running event loop."""
        await asyncio.to_thread(self.destroy)
        logger.info("RateLimiter shutdown complete")

    def evaluate(self, event: EventLike) -> ReportDecision:
        """Decide whether an event should be reported and record the sighting.

        Args:
            event: Event mapping or ``ErrorEvent``.

        Returns:
            ReportDecision: The decision plus window bookkeeping.
        """
        key = fingerprint(event)
        with self._lock:
            now = self._clock()
            entry = self._error_counts.get(key)

            if entry is None or entry.first_seen < now - self.window_seconds:
                entry = ErrorRateLimit(count=1, first_seen=now, last_seen=now)
                self._error_counts[key] = entry
                admitted = True
            elif entry.count >= self.max_reports_per_window:
                # over the cap: keep the entry alive for the sweeper, never count past the cap
                entry.last_seen = now
                admitted = False
            else:
                entry.count += 1
                entry.last_seen = now
                admitted = True

            count = entry.count
            reset_in = max(entry.first_seen + self.window_seconds - now, 0.0)

        logger.debug(f"Error {key[:12]} {'admitted' if admitted else 'dropped'} ({count}/{self.max_reports_per_window})")
        return ReportDecision(
            admitted=admitted,
            fingerprint=key,
            count=count,
            remaining=max(self.max_reports_per_window - count, 0),
            reset_in=reset_in,
        )

    def should_report(self, event: EventLike) -> bool:
        """Check whether an event should be forwarded.

        Args:
            event: Event mapping or ``ErrorEvent``.

        Returns:
            bool: True to admit, False to drop.
        """
        return self.evaluate(event).admitted

    def cleanup(self) -> int:
        """Remove entries not seen for longer than one window.

        Returns:
            int: Number of entries removed.
        """
        with self._lock:
            cutoff = self._clock() - self.window_seconds
            stale = [key for key, entry in self._error_counts.items() if entry.last_seen < cutoff]
            for key in stale:
                del self._error_counts[key]

        if stale:
            logger.debug(f"Evicted {len(stale)} stale error fingerprints")
        return len(stale)

    def get_stats(self) -> RateLimiterStats:
        """Snapshot the tracked errors.

        Returns:
            RateLimiterStats: Number of tracked fingerprints and their counters.
        """
        with self._lock:
            items = [(key, entry.count, entry.first_seen, entry.last_seen) for key, entry in self._error_counts.items()]

        return RateLimiterStats(
            tracked_errors=len(items),
            errors=[
                TrackedError(
                    fingerprint=key,
                    count=count,
                    first_seen=datetime.fromtimestamp(first_seen, tz=timezone.utc),
                    last_seen=datetime.fromtimestamp(last_seen, tz=timezone.utc),
                )
                for key, count, first_seen, last_seen in items
            ],
        )

    def _cleanup_worker(self) -> None:
        """Background thread to periodically evict stale entries."""
        while not self._stop_event.wait(self.cleanup_interval):
            try:
                self.cleanup()
            except Exception as e:  # pylint: disable=broad-except
                logger.error(f"Error in error throttle cleanup thread: {e}", exc_info=True)
        logger.info("Error throttle cleanup thread stopped")
