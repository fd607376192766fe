# -*- coding: utf-8 -*-
"""Location: ./errorthrottle/services/fingerprint.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: Mihai Criveti

Error fingerprinting.

Reduces an error-report event to a stable identity string. The identity is the
SHA-256 hex digest of ``{type}:{message}:{stack}``, where ``stack`` is the last
``FINGERPRINT_FRAMES`` frames of the first exception formatted as
``filename:lineno`` and joined with ``|``.

``DEFAULT_MESSAGE``, ``DEFAULT_TYPE`` and ``FINGERPRINT_FRAMES`` are part of the
fingerprint contract: changing any of them changes every fingerprint.

Examples:
    >>> a = fingerprint({"message": "x is undefined", "exception": {"values": [{"type": "TypeError"}]}})
    >>> b = fingerprint({"message": "x is undefined", "exception": {"values": [{"type": "TypeError"}]}})
    >>> a == b, len(a)
    (True, 64)
    >>> fingerprint({}) == fingerprint(None)
    True
"""

# Standard
import hashlib
import traceback
from typing import Any, Dict, List, Mapping, Optional, Union

# Third-Party
from pydantic import BaseModel

DEFAULT_MESSAGE = "unknown"
DEFAULT_TYPE = "Error"
FINGERPRINT_FRAMES = 3

EventLike = Union[Mapping[str, Any], BaseModel, None]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Coerce ``value`` into a mapping, treating anything else as empty.

    Args:
        value: Candidate mapping or Pydantic model.

    Returns:
        Mapping[str, Any]: The mapping, a dump of the model, or ``{}``.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if isinstance(value, Mapping):
        return value
    return {}


def _first_exception(event: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the first exception entry of an event.

    Args:
        event: Event mapping.

    Returns:
        Mapping[str, Any]: The first ``exception.values`` entry, or ``{}``.
    """
    values = _as_mapping(event.get("exception")).get("values")
    if isinstance(values, (list, tuple)) and values:
        return _as_mapping(values[0])
    return {}


def _text(value: Any) -> Optional[str]:
    """Return ``value`` as a non-empty string or None.

    Args:
        value: Raw field value.

    Returns:
        Optional[str]: ``value`` as text, or None when missing or empty.
    """
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _frame_signature(exception: Mapping[str, Any]) -> str:
    """Format the trailing frames of an exception.

    Args:
        exception: Exception entry.

    Returns:
        str: ``filename:lineno`` for each of the last frames joined with ``|``,
        or an empty string when there are none.

    Examples:
        >>> frames = [{"filename": f"f{i}.py", "lineno": i} for i in range(5)]
        >>> _frame_signature({"stacktrace": {"frames": frames}})
        'f2.py:2|f3.py:3|f4.py:4'
        >>> _frame_signature({"stacktrace": {"frames": [{"lineno": 7}]}})
        ':7'
        >>> _frame_signature({"stacktrace": {"frames": "garbage"}})
        ''
        >>> _frame_signature({"stacktrace": {"frames": [{"filename": "a", "lineno": 10.0}]}})
        'a:10'
    """
    frames = _as_mapping(exception.get("stacktrace")).get("frames")
    if not isinstance(frames, (list, tuple)):
        return ""
    parts = []
    for frame in frames[-FINGERPRINT_FRAMES:]:
        frame = _as_mapping(frame)
        filename = frame.get("filename")
        lineno = frame.get("lineno")
        # integral floats collapse with ints
        if isinstance(lineno, float) and lineno.is_integer():
            lineno = int(lineno)
        parts.append(f"{'' if filename is None else filename}:{'' if lineno is None else lineno}")
    return "|".join(parts)


def fingerprint(event: EventLike) -> str:
    """Compute the fingerprint of an error event.

    Never raises: missing or wrong-typed fields fall back to ``DEFAULT_MESSAGE``,
    ``DEFAULT_TYPE`` and an empty stack segment.

    Args:
        event: Event mapping or ``ErrorEvent``.

    Returns:
        str: 64 character hex digest.

    Examples:
        >>> def ev(line):
        ...     return {"exception": {"values": [{"type": "E", "value": "v",
        ...             "stacktrace": {"frames": [{"filename": "a.py", "lineno": line}]}}]}}
        >>> fingerprint(ev(1)) == fingerprint(ev(1))
        True
        >>> fingerprint(ev(1)) == fingerprint(ev(2))
        False
    """
    data = _as_mapping(event)
    exception = _first_exception(data)

    message = _text(data.get("message")) or _text(exception.get("value")) or DEFAULT_MESSAGE
    error_type = _text(exception.get("type")) or DEFAULT_TYPE
    stack = _frame_signature(exception)

    raw = f"{error_type}:{message}:{stack}"
    return hashlib.sha256(raw.encode("utf-8", errors="replace")).hexdigest()


def event_from_exception(exc: BaseException) -> Dict[str, Any]:
    """Build an event mapping from a live exception.

    Frames come from the exception's traceback, oldest first, so the last
    frames are the ones closest to the raise site.

    Args:
        exc: Exception to describe.

    Returns:
        Dict[str, Any]: Event with a single ``exception.values`` entry.

    Examples:
        >>> try:
        ...     raise ValueError("bad value")
        ... except ValueError as e:
        ...     event = event_from_exception(e)
        >>> entry = event["exception"]["values"][0]
        >>> entry["type"], entry["value"], len(entry["stacktrace"]["frames"])
        ('ValueError', 'bad value', 1)
    """
    frames: List[Dict[str, Any]] = []
    if exc.__traceback__ is not None:
        frames = [{"filename": f.filename, "lineno": f.lineno} for f in traceback.extract_tb(exc.__traceback__)]
    return {
        "exception": {
            "values": [
                {
                    "type": type(exc).__name__,
                    "value": str(exc),
                    "stacktrace": {"frames": frames},
                }
            ]
        }
    }
