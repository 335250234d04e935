"""Tests for budget period windows."""

from datetime import date

import pytest

from ledgerkit.domain.entities import BudgetPeriod
from ledgerkit.domain.periods import period_window


@pytest.mark.parametrize(
    "period,today,start,end,label",
    [
        (BudgetPeriod.MONTHLY, date(2025, 1, 15), date(2025, 1, 1), date(2025, 1, 31), "January 2025"),
        (BudgetPeriod.MONTHLY, date(2024, 2, 29), date(2024, 2, 1), date(2024, 2, 29), "February 2024"),
        (BudgetPeriod.WEEKLY, date(2025, 1, 8), date(2025, 1, 6), date(2025, 1, 12), "Week of Jan 6"),
        (BudgetPeriod.WEEKLY, date(2025, 1, 6), date(2025, 1, 6), date(2025, 1, 12), "Week of Jan 6"),
        (BudgetPeriod.WEEKLY, date(2025, 1, 12), date(2025, 1, 6), date(2025, 1, 12), "Week of Jan 6"),
        (BudgetPeriod.QUARTERLY, date(2025, 5, 10), date(2025, 4, 1), date(2025, 6, 30), "Q2 2025"),
        (BudgetPeriod.QUARTERLY, date(2025, 12, 31), date(2025, 10, 1), date(2025, 12, 31), "Q4 2025"),
        (BudgetPeriod.YEARLY, date(2025, 7, 4), date(2025, 1, 1), date(2025, 12, 31), "2025"),
    ],
)
def test_period_window(period, today, start, end, label):
    window = period_window(period, today)

    assert (window.start, window.end, window.label) == (start, end, label)
    assert window.period == period
    assert window.date_range.contains(today)


def test_period_window_accepts_string():
    assert period_window("weekly", date(2025, 1, 8)).period == BudgetPeriod.WEEKLY
