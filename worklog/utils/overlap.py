"""Overlap admission control for time entries."""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

OVERLAP_TOLERANCE_MINUTES = 2


@dataclass(frozen=True)
class Interval:
    """A span of time; ``id`` identifies the stored entry it came from."""

    start: datetime
    end: datetime
    id: Optional[str] = None


def overlap_span(first: Interval, second: Interval) -> timedelta:
    """Length of the shared part of two intervals (zero when disjoint)."""
    latest_start = max(first.start, second.start)
    earliest_end = min(first.end, second.end)
    return max(timedelta(0), earliest_end - latest_start)


def overlap_minutes(first: Interval, second: Interval) -> int:
    """
    Whole minutes two intervals share.

    Examples:
        >>> from datetime import datetime
        >>> a = Interval(datetime(2026, 1, 10, 9), datetime(2026, 1, 10, 11))
        >>> b = Interval(datetime(2026, 1, 10, 10, 59), datetime(2026, 1, 10, 12))
        >>> overlap_minutes(a, b)
        61
    """
    return int(overlap_span(first, second).total_seconds() // 60)


def find_collisions(
    candidate: Interval,
    existing: Iterable[Interval],
    tolerance_minutes: int = OVERLAP_TOLERANCE_MINUTES,
    exclude_id: Optional[str] = None,
) -> list[Interval]:
    """
    Return the existing intervals that overlap the candidate beyond tolerance.

    Args:
        candidate: Interval being written
        existing: The owner's stored intervals
        tolerance_minutes: Largest overlap still allowed
        exclude_id: Id of the entry being edited, never counted against itself

    Returns:
        Colliding intervals, in input order
    """
    tolerance = timedelta(minutes=tolerance_minutes)
    return [
        interval
        for interval in existing
        if not (exclude_id is not None and interval.id == exclude_id)
        and overlap_span(candidate, interval) > tolerance
    ]


def is_admissible(
    candidate: Interval,
    existing: Iterable[Interval],
    tolerance_minutes: int = OVERLAP_TOLERANCE_MINUTES,
    exclude_id: Optional[str] = None,
) -> bool:
    """True if no existing interval overlaps the candidate beyond tolerance."""
    return not find_collisions(candidate, existing, tolerance_minutes, exclude_id)
