"""Date-range conflict checks between an existing stay and a requested one.

Both policies treat range endpoints as inclusive, so a stay that starts on
the instant another one ends is a conflict.
"""

from collections.abc import Callable
from datetime import datetime

OverlapChecker = Callable[[datetime, datetime, datetime, datetime], bool]


def endpoints_overlap(
    existing_start: datetime,
    existing_end: datetime,
    new_start: datetime,
    new_end: datetime,
) -> bool:
    """Return True if either requested endpoint lands inside the existing range.

    A requested range that strictly engulfs the existing one is *not* reported.
    """
    return existing_start <= new_start <= existing_end or existing_start <= new_end <= existing_end


def closed_ranges_overlap(
    existing_start: datetime,
    existing_end: datetime,
    new_start: datetime,
    new_end: datetime,
) -> bool:
    """Return True if the two closed ranges share at least one instant."""
    return new_start <= existing_end and new_end >= existing_start


OVERLAP_POLICIES: dict[str, OverlapChecker] = {
    "endpoint": endpoints_overlap,
    "closed": closed_ranges_overlap,
}


def get_overlap_checker(policy: str) -> OverlapChecker:
    """Look up an overlap checker by policy name.

    Raises:
        ValueError: If the policy name is unknown.
    """
    try:
        return OVERLAP_POLICIES[policy]
    except KeyError:
        raise ValueError(f"Unknown booking overlap policy: {policy!r}") from None
