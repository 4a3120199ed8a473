"""
Recurrence Prediction Models.

This module provides the Pydantic model emitted by the recurrence detection
engine: one forecast per merchant group with a detected recurring series.
"""

import logging
from typing import Dict, Any, List
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, ConfigDict

from models.transaction import AnnotatedTransaction

logger = logging.getLogger(__name__)


class RecurrencePrediction(BaseModel):
    """
    Predicted next occurrence of a recurring series.

    Created fresh on every engine run; predictions carry no identity across
    runs, so merging with earlier results is up to the caller.
    """
    label: str = Field(alias="name")  # Label of the most recent recurring transaction
    owner_id: str = Field(alias="user_id")
    next_amount: Decimal = Field(alias="next_amt")
    next_date: date
    member_transactions: List[AnnotatedTransaction] = Field(
        default_factory=list,
        alias="transactions",
        description="Transactions flagged as part of the recurring series, oldest first"
    )

    group_key: str = Field(default="", alias="company")
    interval_days: int = Field(ge=0)

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @property
    def occurrences(self) -> int:
        return len(self.member_transactions)

    def to_api_item(self) -> Dict[str, Any]:
        """Render in the upstream response shape with JSON-compatible values."""
        data = self.model_dump(by_alias=True, mode='json', exclude={'member_transactions'})
        data['transactions'] = [txn.to_api_item() for txn in self.member_transactions]
        return data
