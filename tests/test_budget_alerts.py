"""Tests for budget alerts."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.budget_alerts import BudgetAlertService, classify
from ledgerkit.domain.entities import BudgetPeriod, Severity, SplitItem


@pytest.mark.parametrize(
    "spent,budget,severity",
    [
        ("0", "500", Severity.OK),
        ("399.99", "500", Severity.OK),
        ("400", "500", Severity.WARNING),
        ("499.99", "500", Severity.WARNING),
        ("500", "500", Severity.DANGER),
        ("900", "500", Severity.DANGER),
        ("10", "0", Severity.OK),
    ],
)
def test_classify(spent, budget, severity):
    assert classify(Decimal(spent), Decimal(budget)) == severity


@pytest.fixture
def budget_ledger(temp_store, user_id, categories, add_transaction):
    """Groceries $410 of $500, Dining $250 of $200, Fun $10 of $100 weekly."""
    add_transaction(amount="400.00", category_id=categories["groceries"], on=date(2024, 1, 3))
    add_transaction(amount="10.00", category_id=categories["groceries"], on=date(2024, 1, 19))
    # Last month does not count toward January
    add_transaction(amount="300.00", category_id=categories["groceries"], on=date(2023, 12, 30))
    add_transaction(amount="250.00", category_id=categories["dining"], on=date(2024, 1, 5))

    fun = temp_store.create_category(
        user_id, "Fun", budget_amount=Decimal("100.00"), budget_period=BudgetPeriod.WEEKLY
    )
    add_transaction(amount="10.00", category_id=fun, on=date(2024, 1, 15))
    # Earlier week
    add_transaction(amount="90.00", category_id=fun, on=date(2024, 1, 14))
    return {**categories, "fun": fun}


def test_budget_scenario(budget_service, user_id, budget_ledger):
    """$410 spent of a $500 monthly budget is an 82% warning."""
    alerts = {a.category_name: a for a in budget_service.get_alerts(user_id)}

    groceries = alerts["Groceries"]
    assert groceries.spent == Decimal("410.00")
    assert groceries.percentage == Decimal("82.0")
    assert groceries.severity == Severity.WARNING
    assert groceries.remaining == Decimal("90.00")
    assert groceries.window.label == "January 2024"
    assert "Fun" not in alerts


def test_alerts_order_danger_first(budget_service, user_id, budget_ledger):
    alerts = budget_service.get_alerts(user_id)

    assert [a.category_name for a in alerts] == ["Dining", "Groceries"]
    assert alerts[0].severity == Severity.DANGER
    assert alerts[0].percentage == Decimal("125.0")
    assert alerts[0].remaining == 0


def test_status_includes_all_budgets(budget_service, user_id, budget_ledger):
    statuses = budget_service.get_status(user_id)

    assert [s.category_name for s in statuses] == ["Dining", "Groceries", "Fun"]
    assert statuses[0].remaining == Decimal("-50.00")
    fun = statuses[2]
    assert fun.spent == Decimal("10.00")
    assert fun.severity == Severity.OK
    assert fun.window.label == "Week of Jan 15"


def test_summary(budget_service, user_id, budget_ledger):
    summary = budget_service.get_summary(user_id)

    assert summary.total_categories == 3
    assert summary.total_budget == Decimal("800.00")
    assert summary.total_spent == Decimal("670.00")
    assert summary.total_remaining == Decimal("130.00")
    assert summary.overall_percentage == Decimal("83.8")
    assert (summary.over_budget_count, summary.warning_count, summary.on_track_count) == (1, 1, 1)


def test_split_lines_count_toward_budget(budget_service, split_service, user_id, categories, add_transaction):
    parent = add_transaction(amount="500.00", on=date(2024, 1, 10))
    split_service.split(
        user_id,
        parent,
        [
            SplitItem(categories["groceries"], Decimal("450.00")),
            SplitItem(categories["household"], Decimal("50.00")),
        ],
    )

    statuses = {s.category_name: s for s in budget_service.get_status(user_id)}

    assert statuses["Groceries"].spent == Decimal("450.00")
    assert statuses["Groceries"].severity == Severity.WARNING


def test_no_budgets(temp_store, user_id):
    service = BudgetAlertService(temp_store, today=lambda: date(2024, 1, 20))
    temp_store.create_category(user_id, "Unbudgeted")

    assert service.get_alerts(user_id) == []
    assert service.get_status(user_id) == []
    summary = service.get_summary(user_id)
    assert summary.total_categories == 0
    assert summary.overall_percentage == 0
