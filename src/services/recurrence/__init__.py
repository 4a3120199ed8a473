"""
Recurring Payment Detection Services.

This package groups transactions by merchant, finds each group's dominant
recurrence interval, flags the transactions that follow it and forecasts
the next occurrence.

Public API:
    - RecurrenceEngine: Orchestrates the detection pipeline
    - detect_recurring_payments: One-call convenience wrapper
    - TransactionGrouper: Partitions transactions into merchant groups
    - IntervalAnalyzer: Selects the dominant interval of a group
    - RecurrenceMarker: Flags transactions following the dominant interval
    - RecurrenceForecaster: Predicts next amount and date
    - RecurrenceConfig: Configuration for tolerances and execution
    - DEFAULT_CONFIG: Default configuration instance
"""

from services.recurrence.engine import RecurrenceEngine, detect_recurring_payments
from services.recurrence.grouper import TransactionGrouper
from services.recurrence.forecaster import RecurrenceForecaster
from services.recurrence.config import (
    RecurrenceConfig,
    DEFAULT_CONFIG,
    TIME_DELTA,
    AMOUNT_DELTA,
    MIN_GROUP_SIZE,
)
from services.recurrence.analyzers import (
    IntervalAnalyzer,
    RecurrenceMarker,
    amount_similar,
    days_between,
    select_dominant_interval,
)
from models.transaction import get_group_key

__all__ = [
    'RecurrenceEngine',
    'detect_recurring_payments',
    'TransactionGrouper',
    'RecurrenceForecaster',
    'RecurrenceConfig',
    'DEFAULT_CONFIG',
    'TIME_DELTA',
    'AMOUNT_DELTA',
    'MIN_GROUP_SIZE',
    'IntervalAnalyzer',
    'RecurrenceMarker',
    'amount_similar',
    'days_between',
    'select_dominant_interval',
    'get_group_key',
]
