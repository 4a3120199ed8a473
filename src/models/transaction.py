"""
Transaction Models.

Pydantic models for the transaction records consumed by the recurrence
detection engine, the annotated working copies it flags, and the per-merchant
groups it analyses.

Field aliases follow the upstream record shape (``trans_id``, ``user_id``,
``name``, ``amount``, ``date``) so raw API items validate directly.
"""

import logging
import string
from typing import Dict, Any, Optional, List
from datetime import date, datetime, time, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict

logger = logging.getLogger(__name__)


def get_group_key(label: str) -> str:
    """
    Derive the merchant group key from a transaction label.

    Strips the trailing whitespace-delimited token when it contains an ASCII
    digit, e.g. ``"Walmart 4521"`` -> ``"Walmart"`` while ``"Netflix"`` stays
    as is.

    Args:
        label: Transaction label as received

    Returns:
        Group key string
    """
    if len(label) <= 1:
        return label

    last_space_index = label.rfind(" ")
    if last_space_index == -1:
        return label

    trailing_token = label[last_space_index + 1:]
    if any(ch in string.digits for ch in trailing_token):
        return label[:last_space_index]
    return label


def to_utc_datetime(value: date) -> datetime:
    """
    Normalize a date or datetime to an aware UTC datetime.

    Plain dates map to midnight UTC; naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class Transaction(BaseModel):
    """
    A single financial transaction as supplied by the upstream collaborator.

    Records are frozen: the engine never mutates a received transaction and
    works on AnnotatedTransaction copies instead.

    ``posted_at`` is the UTC calendar date. When the record carries a time of
    day, the exact UTC instant is kept in ``posted_time`` so gaps between
    transactions are measured in fractional days.
    """
    id: str = Field(alias="trans_id", min_length=1)
    owner_id: str = Field(alias="user_id", min_length=1)
    label: str = Field(default="", alias="name")
    amount: Decimal
    posted_at: date = Field(alias="date")
    posted_time: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(
        populate_by_name=True,  # Allows using field names or aliases for population
        frozen=True,
    )

    @model_validator(mode='before')
    @classmethod
    def split_posting_time(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        key = 'date' if 'date' in data else 'posted_at'
        raw = data.get(key)
        if isinstance(raw, str) and 'T' in raw:
            try:
                raw = datetime.fromisoformat(raw.replace('Z', '+00:00'))
            except ValueError:
                # Left as is; the date field reports the error
                return data

        if isinstance(raw, datetime):
            posted_time = to_utc_datetime(raw)
            data = dict(data)
            data[key] = posted_time.date()
            data.setdefault('posted_time', posted_time)
        return data

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        # Floats go through str() so 13.99 stays Decimal("13.99")
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @property
    def group_key(self) -> str:
        """Merchant group key derived from the label."""
        return get_group_key(self.label)

    @property
    def posted_timestamp(self) -> datetime:
        """Exact UTC posting instant, midnight UTC for date-only records."""
        if self.posted_time is not None:
            return self.posted_time
        return to_utc_datetime(self.posted_at)

    @classmethod
    def from_api_item(cls, data: Dict[str, Any]) -> "Transaction":
        """Create from a raw upstream record (aliased field names)."""
        converted_data = dict(data)
        # Upstream stores the derived key as "company"; it is recomputed here
        converted_data.pop('company', None)
        converted_data.pop('_id', None)
        return cls.model_validate(converted_data)

    def to_api_item(self) -> Dict[str, Any]:
        """Render in the upstream record shape with JSON-compatible values."""
        data = self.model_dump(by_alias=True, mode='json')
        posted_time = data.pop('posted_time', None)
        if posted_time is not None:
            data['date'] = posted_time
        return data


class AnnotatedTransaction(Transaction):
    """
    Working copy of a Transaction carrying the recurrence flag.

    Only RecurrenceMarker sets ``is_recurring``, and only on the copies it
    built for the group it is processing.
    """
    is_recurring: bool = Field(default=False)

    model_config = ConfigDict(frozen=False)

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "AnnotatedTransaction":
        """Copy every field of the source transaction into a new annotated record."""
        return cls(**transaction.model_dump(by_alias=False))

    def to_api_item(self) -> Dict[str, Any]:
        """Render in the upstream record shape, including group key and flag."""
        data = super().to_api_item()
        data['company'] = self.group_key
        return data


class TransactionGroup(BaseModel):
    """
    Transactions sharing a group key, ordered ascending by posting time.

    Ties on posting time are broken by label and then by insertion order.
    """
    key: str
    members: List[Transaction] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def owner_id(self) -> Optional[str]:
        if not self.members:
            return None
        return self.members[0].owner_id
