"""Tests for ORM to domain mappers."""

from datetime import date, datetime
from decimal import Decimal

from ledgerkit.database import models
from ledgerkit.database.mappers import (
    category_to_domain,
    split_to_domain,
    transaction_to_domain,
)
from ledgerkit.domain.entities import BudgetPeriod, CategoryType, TransactionType


class TestCategoryMapper:
    """Tests for category mapping."""

    def test_budget_defaults_to_monthly(self):
        orm = models.Category(
            id=1,
            user_id="alice",
            name="Groceries",
            category_type="expense",
            budget_amount=Decimal("500.00"),
            budget_period=None,
            created_at=datetime(2024, 1, 1),
        )

        category = category_to_domain(orm)

        assert category.budget_period == BudgetPeriod.MONTHLY
        assert category.category_type == CategoryType.EXPENSE

    def test_no_budget_no_period(self):
        orm = models.Category(
            id=2,
            user_id="alice",
            name="Salary",
            category_type="income",
            created_at=datetime(2024, 1, 1),
        )

        category = category_to_domain(orm)

        assert category.budget_amount is None
        assert category.budget_period is None
        assert category.category_type == CategoryType.INCOME


class TestTransactionMapper:
    """Tests for transaction and split mapping."""

    def test_transaction_enums_and_decimals(self):
        now = datetime(2024, 1, 1)
        orm = models.Transaction(
            id=5,
            account_id=1,
            date=date(2024, 1, 10),
            amount=12.5,
            type="credit",
            reconciled=False,
            is_split=True,
            created_at=now,
            updated_at=now,
        )

        txn = transaction_to_domain(orm)

        assert txn.type == TransactionType.CREDIT
        assert txn.amount == Decimal("12.5")
        assert txn.is_split is True
        assert txn.linked_transaction_id is None

    def test_split(self):
        orm = models.TransactionSplit(
            id=3,
            transaction_id=5,
            category_id=None,
            amount=Decimal("4.00"),
            description="Tip",
            created_at=datetime(2024, 1, 1),
        )

        split = split_to_domain(orm)

        assert split.amount == Decimal("4.00")
        assert split.description == "Tip"
