"""Tests for domain entities and boundary objects."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import (
    BulkMatchResult,
    CashFlowMonth,
    DateRange,
    LedgerCursor,
    SplitItem,
    SplitPatch,
    TagFilter,
    TransactionType,
)
from ledgerkit.domain.errors import DomainError, ValidationError


class TestSplitItem:
    """Tests for SplitItem payload conversion."""

    def test_from_mapping(self):
        item = SplitItem.from_mapping({"category_id": 3, "amount": "12.50", "description": "Lunch"})
        assert item == SplitItem(3, Decimal("12.50"), "Lunch")

    def test_float_amount_converted_exactly(self):
        assert SplitItem.from_mapping({"amount": 0.1}).amount == Decimal("0.1")

    def test_missing_amount(self):
        with pytest.raises(ValidationError, match="missing 'amount'"):
            SplitItem.from_mapping({"category_id": 3})

    def test_unknown_key(self):
        with pytest.raises(ValidationError, match="Unknown split fields: categoryId"):
            SplitItem.from_mapping({"categoryId": 3, "amount": "1"})

    @pytest.mark.parametrize("amount", [True, None, "abc", "NaN", "Infinity"])
    def test_invalid_amount(self, amount):
        with pytest.raises(ValidationError):
            SplitItem.from_mapping({"amount": amount})

    def test_invalid_category_id(self):
        with pytest.raises(ValidationError):
            SplitItem.from_mapping({"category_id": "3", "amount": "1"})

    def test_sub_cent_amount_rejected(self):
        with pytest.raises(ValidationError, match="at most 2 decimal places"):
            SplitItem(3, Decimal("50.005"))

    def test_trailing_zeros_accepted(self):
        assert SplitItem(3, Decimal("50.000")).amount == Decimal("50.00")

    @pytest.mark.parametrize("amount", [Decimal("-20.00"), "-0.01"])
    def test_negative_amount_rejected(self, amount):
        with pytest.raises(ValidationError, match="must not be negative"):
            SplitItem(None, amount)


class TestSplitPatch:
    """Tests for SplitPatch payload conversion."""

    def test_absent_keys_unchanged(self):
        patch = SplitPatch.from_mapping({"amount": "5"})
        assert patch.amount == Decimal("5")
        assert patch.category_id is None
        assert not patch.clear_category
        assert not patch.update_description

    def test_null_category_clears(self):
        assert SplitPatch.from_mapping({"category_id": None}).clear_category

    def test_conflicting_category_flags(self):
        with pytest.raises(ValidationError):
            SplitPatch(category_id=1, clear_category=True)

    def test_amount_checked_like_split_item(self):
        with pytest.raises(ValidationError, match="at most 2 decimal places"):
            SplitPatch.from_mapping({"amount": "10.001"})
        with pytest.raises(ValidationError, match="must not be negative"):
            SplitPatch(amount=Decimal("-1"))


def test_date_range():
    january = DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert january.contains(date(2024, 1, 31))
    assert not january.contains(date(2024, 2, 1))

    with pytest.raises(ValidationError):
        DateRange(date(2024, 2, 1), date(2024, 1, 1))


def test_domain_errors_are_value_errors():
    assert issubclass(ValidationError, DomainError)
    assert issubclass(DomainError, ValueError)


def test_transaction_type_opposite():
    assert TransactionType.DEBIT.opposite == TransactionType.CREDIT
    assert TransactionType.CREDIT.opposite == TransactionType.DEBIT


def test_tag_filter_active():
    assert not TagFilter().is_active
    assert TagFilter((1,)).is_active


def test_cursor_ordering():
    assert LedgerCursor(date(2024, 1, 1), 9) < LedgerCursor(date(2024, 1, 2), 1)
    assert LedgerCursor(date(2024, 1, 1), 1) < LedgerCursor(date(2024, 1, 1), 2)


def test_result_counts_and_net():
    assert BulkMatchResult().auto_matched_count == 0
    assert BulkMatchResult().needs_review_count == 0
    month = CashFlowMonth("2024-01", Decimal("100"), Decimal("40"))
    assert month.net == Decimal("60")
