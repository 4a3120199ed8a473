"""
Performance monitoring utilities for recurrence detection runs.

Tracks total and per-stage execution time of an engine run along with
transaction, group and prediction counts, and logs them with a level that
reflects how slow the run was.
"""

import time
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass
class PerformanceMetrics:
    """Container for recurrence run performance metrics."""
    operation_name: str
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    elapsed_ms: Optional[float] = None
    transaction_count: int = 0
    groups_analyzed: int = 0
    predictions_made: int = 0
    stage_ms: Dict[str, float] = field(default_factory=dict)

    def finish(self):
        """Mark the operation as finished and calculate elapsed time."""
        self.end_time = time.time()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary for logging."""
        return {
            'operation_name': self.operation_name,
            'elapsed_ms': self.elapsed_ms,
            'transaction_count': self.transaction_count,
            'groups_analyzed': self.groups_analyzed,
            'predictions_made': self.predictions_made,
            'stage_ms': dict(self.stage_ms),
            'timestamp': datetime.now(timezone.utc).isoformat()
        }

    def log_metrics(self, slow_threshold_ms: float = 10000.0):
        """Log the performance metrics."""
        metrics = self.to_dict()

        if self.elapsed_ms is not None and self.elapsed_ms > slow_threshold_ms:
            logger.warning(
                f"Slow recurrence operation: {self.operation_name} took {self.elapsed_ms:.2f}ms",
                extra={'recurrence_metrics': metrics}
            )
        else:
            logger.info(
                f"Recurrence operation completed: {self.operation_name} in "
                f"{(self.elapsed_ms or 0):.2f}ms: {self.transaction_count} transactions, "
                f"{self.groups_analyzed} groups, {self.predictions_made} predictions",
                extra={'recurrence_metrics': metrics}
            )

        if self.stage_ms:
            breakdown = ', '.join(f"{stage}: {ms:.2f}ms" for stage, ms in self.stage_ms.items())
            logger.debug(
                f"Recurrence operation breakdown for {self.operation_name}: {breakdown}",
                extra={'recurrence_metrics': metrics}
            )


class StageTimer:
    """Context manager recording the duration of one named stage."""

    def __init__(self, metrics: PerformanceMetrics, stage: str):
        self.metrics = metrics
        self.stage = stage
        self.start_time: float = 0.0

    def __enter__(self):
        self.start_time = time.time()
        logger.debug(f"Starting stage: {self.stage}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (time.time() - self.start_time) * 1000
        self.metrics.stage_ms[self.stage] = self.metrics.stage_ms.get(self.stage, 0.0) + elapsed_ms
        logger.debug(f"Completed stage {self.stage} in {elapsed_ms:.2f}ms")


class PerformanceTracker:
    """
    Context manager for recurrence run performance tracking.

    Usage:
        with PerformanceTracker("recurrence_detection") as tracker:
            tracker.set_transaction_count(len(transactions))

            with tracker.stage('grouping'):
                groups = grouper.group(transactions)
            tracker.set_groups_analyzed(len(groups))

            with tracker.stage('group_analysis'):
                predictions = analyze(groups)
            tracker.set_predictions_made(len(predictions))
    """

    def __init__(self, operation_name: str, slow_threshold_ms: float = 10000.0):
        self.metrics = PerformanceMetrics(operation_name=operation_name)
        self.slow_threshold_ms = slow_threshold_ms

    def __enter__(self):
        logger.info(f"Starting recurrence operation: {self.metrics.operation_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.metrics.finish()
        if exc_type is not None:
            logger.error(
                f"Recurrence operation {self.metrics.operation_name} failed after "
                f"{self.metrics.elapsed_ms:.2f}ms: {exc_val}"
            )
            return
        self.metrics.log_metrics(self.slow_threshold_ms)

    def stage(self, stage_name: str) -> StageTimer:
        """Create a context manager for tracking a stage."""
        return StageTimer(self.metrics, stage_name)

    def set_transaction_count(self, count: int):
        """Set the number of transactions being processed."""
        self.metrics.transaction_count = count

    def set_groups_analyzed(self, count: int):
        """Set the number of merchant groups analysed."""
        self.metrics.groups_analyzed = count

    def set_predictions_made(self, count: int):
        """Set the number of predictions produced."""
        self.metrics.predictions_made = count
