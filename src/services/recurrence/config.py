"""
Configuration for recurring payment detection.

Centralizes the tolerance bands and execution settings used by the
grouping, interval analysis, marking and forecasting stages.
"""

import os
from dataclasses import dataclass


@dataclass
class RecurrenceConfig:
    """
    Tolerances and execution settings for the recurrence engine.

    Both deltas are relative: 0.20 accepts values within ±20% of the
    reference value.
    """

    time_delta: float = 0.20
    """Relative tolerance applied to the dominant interval when marking."""

    amount_delta: float = 0.20
    """Relative tolerance applied around the earlier amount of a pair."""

    min_group_size: int = 2
    """Minimum transactions a group needs before it is analysed."""

    max_workers: int = 1
    """Worker threads for group analysis; 1 runs groups sequentially."""

    slow_run_warning_ms: float = 10000.0
    """Runs slower than this are logged at WARNING."""

    def __post_init__(self):
        """Validate ranges."""
        for name in ('time_delta', 'amount_delta'):
            value = getattr(self, name)
            if not 0 <= value < 1:
                raise ValueError(f"{name} must be in [0, 1), got {value}")
        if self.min_group_size < 2:
            raise ValueError(
                f"min_group_size must be at least 2, got {self.min_group_size}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_environment(cls) -> 'RecurrenceConfig':
        """
        Create configuration from environment variables with fallback to defaults.

        Environment variables:
        - RECURRENCE_TIME_DELTA
        - RECURRENCE_AMOUNT_DELTA
        - RECURRENCE_MIN_GROUP_SIZE
        - RECURRENCE_MAX_WORKERS
        - RECURRENCE_SLOW_RUN_MS
        """
        return cls(
            time_delta=float(os.getenv('RECURRENCE_TIME_DELTA', 0.20)),
            amount_delta=float(os.getenv('RECURRENCE_AMOUNT_DELTA', 0.20)),
            min_group_size=int(os.getenv('RECURRENCE_MIN_GROUP_SIZE', 2)),
            max_workers=int(os.getenv('RECURRENCE_MAX_WORKERS', 1)),
            slow_run_warning_ms=float(os.getenv('RECURRENCE_SLOW_RUN_MS', 10000.0)),
        )


# Default configuration instance
DEFAULT_CONFIG = RecurrenceConfig()


# Module-level constants mirroring the default configuration
TIME_DELTA = DEFAULT_CONFIG.time_delta
AMOUNT_DELTA = DEFAULT_CONFIG.amount_delta
MIN_GROUP_SIZE = DEFAULT_CONFIG.min_group_size
