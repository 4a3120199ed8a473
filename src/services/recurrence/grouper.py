"""
Transaction grouper for recurring payment detection.

Partitions a flat transaction list into per-merchant series.
"""

import logging
from typing import Dict, Iterable, List

from models.transaction import Transaction, TransactionGroup, get_group_key

logger = logging.getLogger(__name__)


class TransactionGrouper:
    """
    Groups transactions by merchant using the trailing-digit-token heuristic.

    Store numbers and similar suffixes are dropped from the label, so
    ``"Shell 9981"`` and ``"Shell 1203"`` land in the same ``"Shell"`` group.
    """

    def group(self, transactions: Iterable[Transaction]) -> Dict[str, TransactionGroup]:
        """
        Build the group mapping.

        Args:
            transactions: Transactions to partition, in any order

        Returns:
            Dictionary of group key to TransactionGroup, ordered by ascending key
        """
        buckets: Dict[str, List[Transaction]] = {}
        for txn in transactions:
            buckets.setdefault(get_group_key(txn.label), []).append(txn)

        groups: Dict[str, TransactionGroup] = {}
        for key in sorted(buckets):
            # Stable sort keeps insertion order for equal (posting time, label)
            members = sorted(buckets[key], key=lambda t: (t.posted_timestamp, t.label))
            groups[key] = TransactionGroup(key=key, members=members)

        logger.debug(f"Grouped transactions into {len(groups)} merchant groups")
        return groups
