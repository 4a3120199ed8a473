"""
Recurrence marker for recurring payment detection.

Flags the transactions of a group that follow the dominant interval.
"""

import logging
from typing import List

from models.transaction import AnnotatedTransaction, TransactionGroup
from services.recurrence.analyzers.interval import amount_similar, days_between

logger = logging.getLogger(__name__)


class RecurrenceMarker:
    """
    Marks recurring transactions with a greedy forward chain.

    Starting from the earliest transaction, the first later transaction with
    a similar amount and a gap inside the interval tolerance window is taken
    as the next link, and the scan resumes from it. A transaction therefore
    anchors at most one forward match, and transactions off the chain stay
    unflagged.
    """

    def __init__(self, time_delta: float = 0.20, amount_delta: float = 0.20):
        """
        Initialize the recurrence marker.

        Args:
            time_delta: Relative tolerance around the dominant interval
            amount_delta: Relative amount tolerance between linked transactions
        """
        self.time_delta = time_delta
        self.amount_delta = amount_delta

    def mark(self, group: TransactionGroup, interval: int) -> List[AnnotatedTransaction]:
        """
        Flag the transactions of a group that belong to the recurring chain.

        Args:
            group: Transaction group ordered by posting date
            interval: Dominant interval in days

        Returns:
            Annotated copies of every member, in group order
        """
        marked = [AnnotatedTransaction.from_transaction(txn) for txn in group.members]

        time_min = interval * (1 - self.time_delta)
        time_max = interval * (1 + self.time_delta)

        i = 0
        while i < len(marked) - 1:
            anchor = marked[i]
            match = None
            for j in range(i + 1, len(marked)):
                candidate = marked[j]
                gap = days_between(anchor.posted_timestamp, candidate.posted_timestamp)
                if (
                    amount_similar(anchor.amount, candidate.amount, self.amount_delta)
                    and time_min < gap < time_max
                ):
                    match = j
                    break

            if match is None:
                i += 1
                continue

            anchor.is_recurring = True
            marked[match].is_recurring = True
            i = match

        flagged = sum(1 for txn in marked if txn.is_recurring)
        logger.debug(
            f"Group '{group.key}': {flagged} of {len(marked)} transactions "
            f"match {interval}-day interval ({time_min:.1f}-{time_max:.1f} days)"
        )
        return marked
