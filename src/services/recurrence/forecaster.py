"""
Recurrence Forecaster.

Turns the flagged transactions of a group into a prediction of the next
occurrence: the mean flagged amount, due one dominant interval after the
last flagged transaction.
"""

import logging
from typing import List, Optional
from datetime import timedelta
from decimal import Decimal

from models.transaction import AnnotatedTransaction
from models.recurrence import RecurrencePrediction

logger = logging.getLogger(__name__)


class RecurrenceForecaster:
    """Builds RecurrencePrediction objects from marked groups."""

    def forecast(
        self,
        group_key: str,
        owner_id: Optional[str],
        marked: List[AnnotatedTransaction],
        interval: int
    ) -> Optional[RecurrencePrediction]:
        """
        Forecast the next occurrence of a recurring series.

        Args:
            group_key: Key of the group the transactions belong to
            owner_id: Fallback owner if the last recurring transaction has none
            marked: Annotated group members in posting order
            interval: Dominant interval in days

        Returns:
            RecurrencePrediction, or None when no transaction is flagged
        """
        recurring = [txn for txn in marked if txn.is_recurring]
        if not recurring:
            logger.debug(f"Group '{group_key}': no recurring transactions, no forecast")
            return None

        most_recent = recurring[-1]
        next_amount = sum((txn.amount for txn in recurring), Decimal(0)) / len(recurring)
        next_date = most_recent.posted_at + timedelta(days=interval)

        prediction = RecurrencePrediction(
            label=most_recent.label,
            owner_id=most_recent.owner_id or owner_id,
            next_amount=next_amount,
            next_date=next_date,
            member_transactions=recurring,
            group_key=group_key,
            interval_days=interval
        )

        logger.debug(
            f"Group '{group_key}': next {next_amount} on {next_date.isoformat()} "
            f"from {len(recurring)} recurring transactions"
        )
        return prediction
