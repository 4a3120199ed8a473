"""
Analyzers for recurring payment detection.

This package provides the interval analyzer that selects a group's dominant
recurrence interval and the marker that flags the transactions following it.
"""

from services.recurrence.analyzers.interval import (
    IntervalAnalyzer,
    amount_similar,
    days_between,
    select_dominant_interval,
)
from services.recurrence.analyzers.marker import RecurrenceMarker

__all__ = [
    'IntervalAnalyzer',
    'RecurrenceMarker',
    'amount_similar',
    'days_between',
    'select_dominant_interval',
]
