"""
Models package for the recurring payment detection backend.
"""

from .transaction import (
    Transaction,
    AnnotatedTransaction,
    TransactionGroup,
    get_group_key,
)

from .recurrence import (
    RecurrencePrediction,
)

__all__ = [
    'Transaction',
    'AnnotatedTransaction',
    'TransactionGroup',
    'get_group_key',
    'RecurrencePrediction',
]
