"""Budget alert domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from ledgerkit.config import DANGER_THRESHOLD, WARNING_THRESHOLD
from ledgerkit.database.base import LedgerStore
from ledgerkit.domain.entities import (
    BudgetPeriod,
    BudgetStatus,
    BudgetSummary,
    Severity,
    TransactionType,
)
from ledgerkit.domain.periods import period_window
from ledgerkit.domain.spending import ZERO, SpendingService, percent

logger = logging.getLogger(__name__)


def classify(spent: Decimal, budget: Decimal) -> Severity:
    """Map spending against a budget to a severity.

    Spending at or above 100% of the budget is danger, at or above 80% is a
    warning. A zero budget is always ok.
    """
    if budget <= 0:
        return Severity.OK
    ratio = spent / budget
    if ratio >= DANGER_THRESHOLD:
        return Severity.DANGER
    if ratio >= WARNING_THRESHOLD:
        return Severity.WARNING
    return Severity.OK


class BudgetAlertService:
    """Evaluates category budgets against spending in the current period."""

    def __init__(
        self,
        store: LedgerStore,
        spending: Optional[SpendingService] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize budget alert service.

        Args:
            store: Ledger store instance
            spending: Spending service used for category totals
            today: Callable returning the reference date for period windows
        """
        self.store = store
        self.spending = spending or SpendingService(store)
        self.today = today

    def _evaluate(self, user_id: str) -> list[BudgetStatus]:
        reference = self.today()
        statuses = []
        for category in self.store.list_categories(user_id):
            budget = category.budget_amount
            if budget is None or budget <= 0:
                continue

            window = period_window(category.budget_period or BudgetPeriod.MONTHLY, reference)
            spent = self.spending.category_spending(
                user_id, category.id, window.date_range, TransactionType.DEBIT
            )
            statuses.append(
                BudgetStatus(
                    category_id=category.id,
                    category_name=category.name,
                    budget_amount=budget,
                    budget_period=window.period,
                    spent=spent,
                    remaining=budget - spent,
                    percentage=percent(spent, budget),
                    severity=classify(spent, budget),
                    window=window,
                )
            )
        logger.debug("Evaluated %d budgets for %s", len(statuses), user_id)
        return statuses

    def get_alerts(self, user_id: str) -> list[BudgetStatus]:
        """Get categories at or above the warning threshold.

        Danger alerts come first, then alerts by percentage, highest first.
        ``remaining`` never drops below zero.
        """
        alerts = [
            BudgetStatus(
                category_id=s.category_id,
                category_name=s.category_name,
                budget_amount=s.budget_amount,
                budget_period=s.budget_period,
                spent=s.spent,
                remaining=max(ZERO, s.remaining),
                percentage=s.percentage,
                severity=s.severity,
                window=s.window,
            )
            for s in self._evaluate(user_id)
            if s.severity != Severity.OK
        ]
        alerts.sort(key=lambda a: (a.severity != Severity.DANGER, -a.percentage))
        return alerts

    def get_status(self, user_id: str) -> list[BudgetStatus]:
        """Get the status of every budgeted category, highest percentage first.

        ``remaining`` goes negative once a budget is exceeded.
        """
        statuses = self._evaluate(user_id)
        statuses.sort(key=lambda s: s.percentage, reverse=True)
        return statuses

    def get_summary(self, user_id: str) -> BudgetSummary:
        """Get totals and per-severity counts across all budgeted categories."""
        statuses = self.get_status(user_id)
        total_budget = sum((s.budget_amount for s in statuses), ZERO)
        total_spent = sum((s.spent for s in statuses), ZERO)

        return BudgetSummary(
            total_categories=len(statuses),
            total_budget=total_budget,
            total_spent=total_spent,
            total_remaining=total_budget - total_spent,
            overall_percentage=percent(total_spent, total_budget),
            over_budget_count=sum(1 for s in statuses if s.severity == Severity.DANGER),
            warning_count=sum(1 for s in statuses if s.severity == Severity.WARNING),
            on_track_count=sum(1 for s in statuses if s.severity == Severity.OK),
        )
