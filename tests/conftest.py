"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_sqlite_store
from ledgerkit.domain.budget_alerts import BudgetAlertService
from ledgerkit.domain.entities import BudgetPeriod, CategoryType, TransactionType
from ledgerkit.domain.spending import SpendingService
from ledgerkit.domain.splits import SplitService
from ledgerkit.domain.tags import TransactionTagService
from ledgerkit.domain.transfers import TransferService


@pytest.fixture
def temp_store():
    """Create a temporary store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for CLI tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    """User owning the seeded ledger."""
    return "alice"


@pytest.fixture
def accounts(temp_store, user_id):
    """Create three accounts and return their IDs by name."""
    return {
        name: temp_store.create_account(user_id, name)
        for name in ("checking", "savings", "credit_card")
    }


@pytest.fixture
def categories(temp_store, user_id):
    """Create sample categories and return their IDs by name."""
    return {
        "groceries": temp_store.create_category(
            user_id, "Groceries", budget_amount=Decimal("500.00"), budget_period=BudgetPeriod.MONTHLY
        ),
        "dining": temp_store.create_category(user_id, "Dining", budget_amount=Decimal("200.00")),
        "household": temp_store.create_category(user_id, "Household"),
        "salary": temp_store.create_category(user_id, "Salary", category_type=CategoryType.INCOME),
    }


@pytest.fixture
def add_transaction(temp_store, accounts):
    """Factory creating a transaction in one of the sample accounts."""

    def _add(
        account: str = "checking",
        amount: str = "100.00",
        type: TransactionType = TransactionType.DEBIT,
        on: date = date(2024, 1, 15),
        **kwargs,
    ) -> int:
        return temp_store.create_transaction(
            account_id=accounts[account],
            date=on,
            amount=Decimal(amount),
            type=type,
            **kwargs,
        )

    return _add


@pytest.fixture
def tag_sets(temp_store, categories):
    """Create two tag sets on Groceries and return tag set and tag IDs by name."""
    store_set = temp_store.create_tag_set(categories["groceries"], "Store")
    purpose_set = temp_store.create_tag_set(categories["groceries"], "Purpose", description="Why")
    return {
        "store": store_set,
        "purpose": purpose_set,
        "costco": temp_store.create_tag(store_set, "Costco", color="#ff0000"),
        "aldi": temp_store.create_tag(store_set, "Aldi"),
        "weekly": temp_store.create_tag(purpose_set, "Weekly"),
        "party": temp_store.create_tag(purpose_set, "Party"),
    }


@pytest.fixture
def transfer_service(temp_store):
    """Create a TransferService with a temporary store."""
    return TransferService(temp_store)


@pytest.fixture
def split_service(temp_store):
    """Create a SplitService with a temporary store."""
    return SplitService(temp_store)


@pytest.fixture
def spending_service(temp_store):
    """Create a SpendingService with a temporary store."""
    return SpendingService(temp_store)


@pytest.fixture
def tag_service(temp_store):
    """Create a TransactionTagService with a temporary store."""
    return TransactionTagService(temp_store)


@pytest.fixture
def budget_service(temp_store, spending_service):
    """Create a BudgetAlertService pinned to 2024-01-20."""
    return BudgetAlertService(temp_store, spending_service, today=lambda: date(2024, 1, 20))


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
