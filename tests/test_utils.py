"""Tests for money and date helpers."""

from datetime import date

import pytest

from finance_tracker_api.app.core.utils import (
    calculate_percentage_change,
    convert_amount_from_milliunits,
    convert_amount_to_milliunits,
    fill_missing_days,
    resolve_date_range,
    round_half_up,
)


class TestRounding:
    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(2.4) == 2

    def test_convert_to_milliunits(self):
        assert convert_amount_to_milliunits(12.34) == 12340
        assert convert_amount_to_milliunits(-5) == -5000
        assert convert_amount_to_milliunits(1.5) == 1500

    def test_convert_from_milliunits(self):
        assert convert_amount_from_milliunits(1500) == 1.5
        assert convert_amount_from_milliunits(-12340) == -12.34


class TestPercentageChange:
    def test_zero_previous(self):
        assert calculate_percentage_change(0, 0) == 0
        assert calculate_percentage_change(500, 0) == 100
        assert calculate_percentage_change(-500, 0) == 100

    def test_growth_and_decline(self):
        assert calculate_percentage_change(150, 100) == 50
        assert calculate_percentage_change(50, 100) == -50

    def test_relative_to_magnitude_of_previous(self):
        # Expenses shrinking from -200 to -100 reads as +50%.
        assert calculate_percentage_change(-100, -200) == 50
        assert calculate_percentage_change(-300, -200) == -50

    def test_rounds_half_up(self):
        # (1 - 8) / 8 * 100 = -87.5
        assert calculate_percentage_change(1, 8) == -87


class TestDateRange:
    def test_defaults(self):
        start, end = resolve_date_range(None, None, 30, today=date(2024, 3, 31))
        assert end == date(2024, 3, 31)
        assert start == date(2024, 3, 1)

    def test_explicit_bounds(self):
        start, end = resolve_date_range("2024-01-01", "2024-01-31", 30)
        assert (start, end) == (date(2024, 1, 1), date(2024, 1, 31))

    def test_from_defaults_relative_to_to(self):
        start, end = resolve_date_range(None, "2024-02-10", 30)
        assert start == date(2024, 1, 11)
        assert end == date(2024, 2, 10)

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError):
            resolve_date_range("2024-02-01", "2024-01-01", 30)

    def test_malformed_date_rejected(self):
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            resolve_date_range("01/02/2024", None, 30)


class TestFillMissingDays:
    def test_fills_gaps_with_zeros(self):
        active = [{"date": "2024-03-02", "income": 1000, "expenses": 250}]
        days = fill_missing_days(active, date(2024, 3, 1), date(2024, 3, 3))
        assert days == [
            {"date": "2024-03-01", "income": 0, "expenses": 0},
            {"date": "2024-03-02", "income": 1000, "expenses": 250},
            {"date": "2024-03-03", "income": 0, "expenses": 0},
        ]

    def test_accepts_date_objects(self):
        active = [{"date": date(2024, 3, 1), "income": 5, "expenses": 0}]
        days = fill_missing_days(active, date(2024, 3, 1), date(2024, 3, 1))
        assert days == [{"date": "2024-03-01", "income": 5, "expenses": 0}]

    def test_single_day_without_activity(self):
        assert fill_missing_days([], date(2024, 3, 1), date(2024, 3, 1)) == [
            {"date": "2024-03-01", "income": 0, "expenses": 0}
        ]
