"""
Recurring Payment Detection Engine.

This module orchestrates recurrence detection over a flat list of
transactions.

## Detection Pipeline

```mermaid
graph TD
    A[Transactions] --> B[TransactionGrouper]
    B --> C{Per group}
    C --> D[IntervalAnalyzer]
    D -->|no interval| X[Skip group]
    D --> E[RecurrenceMarker]
    E --> F[RecurrenceForecaster]
    F -->|nothing flagged| X
    F --> G[RecurrencePredictions]
```

Groups are independent, so they can be analysed in a thread pool; results
are always returned in ascending group key order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from models.transaction import Transaction, TransactionGroup
from models.recurrence import RecurrencePrediction
from services.recurrence.grouper import TransactionGrouper
from services.recurrence.analyzers import IntervalAnalyzer, RecurrenceMarker
from services.recurrence.forecaster import RecurrenceForecaster
from services.recurrence.config import RecurrenceConfig, DEFAULT_CONFIG
from utils.performance import PerformanceTracker

logger = logging.getLogger(__name__)


class RecurrenceEngine:
    """
    Runs grouping, interval analysis, marking and forecasting.

    The engine keeps no state between runs: the same input always yields the
    same predictions in the same order.
    """

    def __init__(self, config: Optional[RecurrenceConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Optional recurrence configuration. If None, uses DEFAULT_CONFIG.
        """
        self.config = config or DEFAULT_CONFIG

        self.grouper = TransactionGrouper()
        self.interval_analyzer = IntervalAnalyzer(amount_delta=self.config.amount_delta)
        self.marker = RecurrenceMarker(
            time_delta=self.config.time_delta,
            amount_delta=self.config.amount_delta
        )
        self.forecaster = RecurrenceForecaster()

    def run(self, transactions: Iterable[Transaction]) -> List[RecurrencePrediction]:
        """
        Detect recurring series and forecast their next occurrence.

        Args:
            transactions: Transactions to analyse; not modified

        Returns:
            One RecurrencePrediction per group with a recurring series,
            ordered by group key
        """
        transactions = list(transactions)
        if not transactions:
            logger.info("No transactions supplied, nothing to detect")
            return []

        with PerformanceTracker(
            "recurrence_detection", slow_threshold_ms=self.config.slow_run_warning_ms
        ) as tracker:
            tracker.set_transaction_count(len(transactions))

            with tracker.stage("grouping"):
                groups = self.grouper.group(transactions)
            tracker.set_groups_analyzed(len(groups))

            with tracker.stage("group_analysis"):
                if self.config.max_workers > 1 and len(groups) > 1:
                    results = self._analyze_parallel(groups)
                else:
                    results = [self.analyze_group(group) for group in groups.values()]

            predictions = [prediction for prediction in results if prediction is not None]
            tracker.set_predictions_made(len(predictions))

        logger.info(
            f"Detection complete: {len(predictions)} recurring series "
            f"in {len(groups)} groups"
        )
        return predictions

    def analyze_group(self, group: TransactionGroup) -> Optional[RecurrencePrediction]:
        """
        Run interval analysis, marking and forecasting for one group.

        Args:
            group: Transaction group ordered by posting date

        Returns:
            RecurrencePrediction, or None when the group shows no recurrence
        """
        if group.size < self.config.min_group_size:
            logger.debug(f"Skipping group '{group.key}': {group.size} transaction(s)")
            return None

        interval = self.interval_analyzer.dominant_interval(group)
        if interval is None:
            return None

        marked = self.marker.mark(group, interval)
        return self.forecaster.forecast(group.key, group.owner_id, marked, interval)

    def _analyze_parallel(
        self,
        groups: Dict[str, TransactionGroup]
    ) -> List[Optional[RecurrencePrediction]]:
        """
        Analyse groups in a thread pool and collect results in key order.

        Args:
            groups: Group mapping ordered by key

        Returns:
            Per-group results in the same order as ``groups``
        """
        logger.debug(
            f"Analysing {len(groups)} groups with {self.config.max_workers} workers"
        )
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_key = {
                executor.submit(self.analyze_group, group): key
                for key, group in groups.items()
            }

            results_by_key: Dict[str, Optional[RecurrencePrediction]] = {}
            for future, key in future_to_key.items():
                try:
                    results_by_key[key] = future.result()
                except Exception:
                    logger.exception(f"Analysis failed for group '{key}'")
                    raise

        return [results_by_key[key] for key in groups]

    def run_from_api_items(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Run detection on raw upstream records and render the response items.

        Records are keyed by ``trans_id``; when an id repeats, the later record
        replaces the earlier one, as a re-upload of the same transaction does
        upstream.

        Args:
            items: Records in the upstream shape (trans_id, user_id, name, amount, date)

        Returns:
            Predictions in the upstream response shape

        Raises:
            pydantic.ValidationError: If a record is malformed
        """
        by_id: Dict[str, Transaction] = {}
        received = 0
        for item in items:
            transaction = Transaction.from_api_item(item)
            by_id[transaction.id] = transaction
            received += 1

        if received != len(by_id):
            logger.debug(f"Dropped {received - len(by_id)} superseded records with repeated ids")

        transactions = list(by_id.values())
        return [prediction.to_api_item() for prediction in self.run(transactions)]


def detect_recurring_payments(
    transactions: Iterable[Transaction],
    config: Optional[RecurrenceConfig] = None
) -> List[RecurrencePrediction]:
    """Run a RecurrenceEngine with the given configuration."""
    return RecurrenceEngine(config).run(transactions)
