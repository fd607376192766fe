# -*- coding: utf-8 -*-
"""Base model utilities for errorthrottle.

This module provides the shared base class for Pydantic models that are
exposed to callers, so snapshots serialize with the camelCase keys that
error-tracking dashboards expect.

Copyright 2025
SPDX-License-Identifier: Apache-2.0
"""

# Third-Party
from pydantic import BaseModel, ConfigDict


def to_camel_case(s: str) -> str:
    """Convert a string from snake_case to camelCase.

    Args:
        s (str): The string to be converted, which is assumed to be in snake_case.

    Returns:
        str: The string converted to camelCase.

    Examples:
        >>> to_camel_case("tracked_errors")
        'trackedErrors'
        >>> to_camel_case("max_reports_per_window")
        'maxReportsPerWindow'
        >>> to_camel_case("alreadyCamel")
        'alreadyCamel'
        >>> to_camel_case("")
        ''
        >>> to_camel_case("fingerprint")
        'fingerprint'
    """
    return "".join(word.capitalize() if i else word for i, word in enumerate(s.split("_")))


class BaseModelWithConfigDict(BaseModel):
    """Base model with camelCase aliases.

    - **Automatic camelCase conversion**: ``first_seen`` serializes as
      ``firstSeen`` with ``model_dump(by_alias=True)``.
    - **Flexible input**: accepts both snake_case and camelCase keys.
    - **Lenient**: unknown keys are ignored.

    Examples:
        >>> class Snapshot(BaseModelWithConfigDict):
        ...     tracked_errors: int = 0
        >>> Snapshot().model_dump(by_alias=True)
        {'trackedErrors': 0}
        >>> Snapshot(trackedErrors=3).tracked_errors
        3
        >>> Snapshot(tracked_errors=2, bogus=1).model_dump()
        {'tracked_errors': 2}
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        extra="ignore",
    )
