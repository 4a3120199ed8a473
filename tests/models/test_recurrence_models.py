"""
Unit tests for the RecurrencePrediction model.
"""

import pytest
from decimal import Decimal
from datetime import date
from pydantic import ValidationError

from models.transaction import AnnotatedTransaction, Transaction
from models.recurrence import RecurrencePrediction


@pytest.fixture
def members():
    """Two flagged Netflix transactions."""
    result = []
    for i, posted in enumerate([date(2018, 9, 18), date(2018, 10, 18)]):
        txn = Transaction(id=f"t{i}", owner_id="user123", label="Netflix", amount=Decimal("13.99"), posted_at=posted)
        annotated = AnnotatedTransaction.from_transaction(txn)
        annotated.is_recurring = True
        result.append(annotated)
    return result


class TestRecurrencePrediction:
    """Test cases for RecurrencePrediction."""

    def test_create(self, members):
        prediction = RecurrencePrediction(
            label="Netflix",
            owner_id="user123",
            next_amount=Decimal("13.99"),
            next_date=date(2018, 11, 17),
            member_transactions=members,
            group_key="Netflix",
            interval_days=30
        )
        assert prediction.occurrences == 2
        assert prediction.member_transactions[0].id == "t0"

    def test_negative_interval_rejected(self, members):
        with pytest.raises(ValidationError):
            RecurrencePrediction(
                label="Netflix",
                owner_id="user123",
                next_amount=Decimal("13.99"),
                next_date=date(2018, 11, 17),
                member_transactions=members,
                interval_days=-1
            )

    def test_to_api_item(self, members):
        prediction = RecurrencePrediction(
            label="Netflix",
            owner_id="user123",
            next_amount=Decimal("13.99"),
            next_date=date(2018, 11, 17),
            member_transactions=members,
            group_key="Netflix",
            interval_days=30
        )
        item = prediction.to_api_item()

        assert item["name"] == "Netflix"
        assert item["user_id"] == "user123"
        assert item["next_amt"] == "13.99"
        assert item["next_date"] == "2018-11-17"
        assert item["company"] == "Netflix"
        assert item["interval_days"] == 30
        assert [t["trans_id"] for t in item["transactions"]] == ["t0", "t1"]
        assert all(t["is_recurring"] for t in item["transactions"])

    def test_decimal_rendered_without_json_encoders(self, members):
        assert "json_encoders" not in RecurrencePrediction.model_config

        prediction = RecurrencePrediction(
            label="Netflix",
            owner_id="user123",
            next_amount=Decimal("105"),
            next_date=date(2018, 11, 17),
            member_transactions=members,
            interval_days=30
        )

        assert prediction.to_api_item()["next_amt"] == "105"
