"""
Unit tests for IntervalAnalyzer and its helpers.

Tests amount similarity bands, histogram construction and dominant interval
selection.
"""

import pytest
from decimal import Decimal
from datetime import date, datetime, timedelta, timezone

from services.recurrence.analyzers.interval import (
    IntervalAnalyzer,
    amount_similar,
    days_between,
    select_dominant_interval,
)
from tests.fixtures.recurrence_fixtures import (
    create_group,
    create_netflix_transactions,
    create_series,
    create_transaction,
)


class TestAmountSimilar:
    """Test cases for the asymmetric amount tolerance band."""

    @pytest.mark.parametrize("reference,candidate,expected", [
        (100, 119, True),
        (100, 121, False),
        (119, 100, True),
        (100, 120, False),   # upper bound is strict
        (100, 80, False),    # lower bound is strict
        (100, 81, True),
        (81, 100, False),    # band is built around the first argument
        (Decimal("13.99"), Decimal("13.99"), True),
    ])
    def test_default_band(self, reference, candidate, expected):
        assert amount_similar(reference, candidate) is expected

    def test_zero_reference_never_matches(self):
        assert amount_similar(0, 0) is False
        assert amount_similar(Decimal("0"), Decimal("0.01")) is False

    def test_negative_reference_never_matches(self):
        assert amount_similar(-100, -100) is False

    def test_custom_delta(self):
        assert amount_similar(100, 109, delta=0.10) is True
        assert amount_similar(100, 111, delta=0.10) is False


class TestDaysBetween:

    def test_absolute_gap(self):
        assert days_between(date(2018, 9, 18), date(2018, 10, 18)) == 30.0
        assert days_between(date(2018, 10, 18), date(2018, 9, 18)) == 30.0

    def test_same_day(self):
        assert days_between(date(2024, 1, 1), date(2024, 1, 1)) == 0.0

    def test_fractional_days_from_posting_times(self):
        first = datetime(2024, 1, 1, tzinfo=timezone.utc)
        second = datetime(2024, 1, 25, 23, tzinfo=timezone.utc)

        assert days_between(first, second) == pytest.approx(24 + 23 / 24)
        assert days_between(second, first) == pytest.approx(24 + 23 / 24)

    def test_mixed_date_and_datetime(self):
        assert days_between(date(2024, 1, 1), datetime(2024, 1, 2, 12, tzinfo=timezone.utc)) == 1.5


class TestSelectDominantInterval:

    def test_tie_goes_to_smaller_interval(self):
        assert select_dominant_interval({30: 2, 60: 2}) == 30
        assert select_dominant_interval({60: 2, 30: 2}) == 30

    def test_highest_count_wins(self):
        assert select_dominant_interval({7: 1, 30: 3, 31: 2}) == 30

    def test_empty_histogram(self):
        assert select_dominant_interval({}) is None


class TestIntervalAnalyzer:
    """Test suite for IntervalAnalyzer."""

    @pytest.fixture
    def analyzer(self):
        return IntervalAnalyzer()

    def test_single_member_has_no_interval(self, analyzer):
        group = create_group("Spotify", [create_transaction("Spotify", "9.99", date(2024, 1, 3))])

        assert analyzer.interval_histogram(group) == {}
        assert analyzer.dominant_interval(group) is None

    def test_netflix_histogram(self, analyzer):
        group = create_group("Netflix", create_netflix_transactions())

        assert analyzer.interval_histogram(group) == {30: 1, 31: 1, 61: 1}
        assert analyzer.dominant_interval(group) == 30

    def test_monthly_series(self, analyzer):
        group = create_group("Rent", create_series("Rent", "900", date(2024, 1, 1), 30, 6))

        histogram = analyzer.interval_histogram(group)

        assert histogram == {30: 5, 60: 4, 90: 3, 120: 2, 150: 1}
        assert analyzer.dominant_interval(group) == 30

    def test_missing_occurrence_resolves_to_smaller_interval(self, analyzer):
        start = date(2024, 1, 1)
        transactions = [
            create_transaction("Gym", "45", start + timedelta(days=offset))
            for offset in (0, 30, 90, 120)
        ]
        group = create_group("Gym", transactions)

        assert analyzer.interval_histogram(group) == {30: 2, 60: 1, 90: 2, 120: 1}
        assert analyzer.dominant_interval(group) == 30

    def test_dissimilar_amounts_are_ignored(self, analyzer):
        transactions = [
            create_transaction("Store", "10", date(2024, 1, 1)),
            create_transaction("Store", "500", date(2024, 1, 16)),
            create_transaction("Store", "10", date(2024, 1, 31)),
        ]
        group = create_group("Store", transactions)

        assert analyzer.interval_histogram(group) == {30: 1}

    def test_no_similar_pairs(self, analyzer):
        transactions = [
            create_transaction("Store", "10", date(2024, 1, 1)),
            create_transaction("Store", "500", date(2024, 7, 19)),
        ]
        group = create_group("Store", transactions)

        assert analyzer.dominant_interval(group) is None

    def test_amount_delta_is_configurable(self):
        transactions = [
            create_transaction("Power", "100", date(2024, 1, 1)),
            create_transaction("Power", "115", date(2024, 1, 31)),
        ]
        group = create_group("Power", transactions)

        assert IntervalAnalyzer(amount_delta=0.20).dominant_interval(group) == 30
        assert IntervalAnalyzer(amount_delta=0.10).dominant_interval(group) is None

    def test_histogram_rounds_fractional_gaps(self, analyzer):
        transactions = [
            create_transaction("Gym", "45", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            create_transaction("Gym", "45", datetime(2024, 1, 25, 23, tzinfo=timezone.utc)),
            create_transaction("Gym", "45", datetime(2024, 2, 24, 23, tzinfo=timezone.utc)),
            create_transaction("Gym", "45", datetime(2024, 3, 25, 23, tzinfo=timezone.utc)),
        ]
        group = create_group("Gym", transactions)

        assert analyzer.interval_histogram(group) == {25: 1, 30: 2, 55: 1, 60: 1, 85: 1}
        assert analyzer.dominant_interval(group) == 30

    def test_half_day_rounds_up(self, analyzer):
        transactions = [
            create_transaction("Gym", "45", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            create_transaction("Gym", "45", datetime(2024, 1, 30, 12, tzinfo=timezone.utc)),
        ]
        group = create_group("Gym", transactions)

        assert analyzer.interval_histogram(group) == {30: 1}
