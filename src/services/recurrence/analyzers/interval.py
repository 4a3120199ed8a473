"""
Interval analyzer for recurring payment detection.

Builds a histogram of day gaps between amount-consistent transaction pairs
and selects the dominant recurrence interval.
"""

import logging
from typing import Dict, Optional, Union
from datetime import date
from decimal import Decimal

import numpy as np

from models.transaction import TransactionGroup, to_utc_datetime

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0

Number = Union[Decimal, int, float]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def amount_similar(reference: Number, candidate: Number, delta: float = 0.20) -> bool:
    """
    Check whether ``candidate`` lies strictly inside ``reference ± reference·delta``.

    The band is built around the first argument only, so the check is not
    symmetric: ``amount_similar(119, 100)`` holds while the band around 100
    excludes 121. A zero or negative reference yields an empty band.

    Args:
        reference: Amount of the earlier transaction
        candidate: Amount of the later transaction
        delta: Relative tolerance (0.20 for ±20%)

    Returns:
        True if the candidate falls inside the band
    """
    ref = _to_decimal(reference)
    cand = _to_decimal(candidate)
    band = ref * _to_decimal(delta)
    return ref - band < cand < ref + band


def days_between(first: date, second: date) -> float:
    """
    Absolute number of days between two postings, fractional when times are known.

    Plain dates count from midnight UTC.
    """
    delta = to_utc_datetime(second) - to_utc_datetime(first)
    return abs(delta.total_seconds()) / SECONDS_PER_DAY


def select_dominant_interval(histogram: Dict[int, int]) -> Optional[int]:
    """
    Pick the interval with the highest count.

    Keys are visited in ascending order and only a strictly higher count
    replaces the current best, so ties resolve to the smaller interval.

    Args:
        histogram: Mapping of interval in days to occurrence count

    Returns:
        Dominant interval, or None for an empty histogram
    """
    dominant: Optional[int] = None
    most_occurrences = 0
    for interval in sorted(histogram):
        if histogram[interval] > most_occurrences:
            most_occurrences = histogram[interval]
            dominant = interval
    return dominant


class IntervalAnalyzer:
    """
    Detects the dominant recurrence interval of a transaction group.

    Every pair of transactions is compared (O(n²) per group), which tolerates
    missing or irregular transactions in the middle of a series better than
    looking at consecutive gaps only.
    """

    def __init__(self, amount_delta: float = 0.20):
        """
        Initialize the interval analyzer.

        Args:
            amount_delta: Relative amount tolerance for a pair to count
        """
        self.amount_delta = amount_delta

    def interval_histogram(self, group: TransactionGroup) -> Dict[int, int]:
        """
        Count rounded day gaps over all amount-consistent pairs.

        Args:
            group: Transaction group ordered by posting time

        Returns:
            Dictionary of interval in days to count, ascending by interval
        """
        members = group.members
        if len(members) < 2:
            return {}

        timestamps = np.array([txn.posted_timestamp.timestamp() for txn in members], dtype=float)
        rows, cols = np.triu_indices(len(members), k=1)

        similar = np.array(
            [
                amount_similar(members[i].amount, members[j].amount, self.amount_delta)
                for i, j in zip(rows, cols)
            ],
            dtype=bool
        )
        if not similar.any():
            return {}

        gaps = np.abs(timestamps[cols] - timestamps[rows])[similar] / SECONDS_PER_DAY
        # Round half up
        buckets = np.floor(gaps + 0.5).astype(int)
        intervals, counts = np.unique(buckets, return_counts=True)

        return {int(interval): int(count) for interval, count in zip(intervals, counts)}

    def dominant_interval(self, group: TransactionGroup) -> Optional[int]:
        """
        Detect the dominant recurrence interval of a group.

        Args:
            group: Transaction group ordered by posting time

        Returns:
            Interval in days, or None when no amount-consistent pair exists
        """
        histogram = self.interval_histogram(group)
        interval = select_dominant_interval(histogram)

        if interval is None:
            logger.debug(f"No amount-consistent pairs in group '{group.key}'")
        else:
            logger.debug(
                f"Group '{group.key}': dominant interval {interval} days "
                f"({histogram[interval]} of {sum(histogram.values())} pairs)"
            )
        return interval
