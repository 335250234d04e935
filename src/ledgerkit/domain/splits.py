"""Split transaction domain service."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from ledgerkit.config import AMOUNT_EPSILON
from ledgerkit.database.base import LedgerStore
from ledgerkit.domain.entities import (
    SplitItem,
    SplitPatch,
    Transaction,
    TransactionSplit,
)
from ledgerkit.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    split_not_found,
    split_sum_mismatch,
    split_too_few_parts,
    transaction_not_found,
    transaction_not_split,
)

logger = logging.getLogger(__name__)

MIN_SPLIT_PARTS = 2


def amounts_match(total: Decimal, expected: Decimal) -> bool:
    """Return True when two amounts agree within AMOUNT_EPSILON."""
    return abs(total - expected) <= AMOUNT_EPSILON


def iter_attributions(
    transactions: Sequence[Transaction],
    splits_by_transaction: Mapping[int, Sequence[TransactionSplit]],
) -> Iterator[tuple[Optional[int], Decimal]]:
    """Yield (category_id, amount) pairs for each attributed line.

    A split parent contributes nothing itself; each of its split lines
    contributes its own amount to its own category. Any other transaction
    contributes its full amount to its category. ``None`` stands for
    uncategorized.
    """
    for txn in transactions:
        if txn.is_split:
            for split in splits_by_transaction.get(txn.id, ()):
                yield split.category_id, split.amount
        else:
            yield txn.category_id, txn.amount


def attribute_amounts(
    transactions: Sequence[Transaction],
    splits_by_transaction: Mapping[int, Sequence[TransactionSplit]],
) -> dict[Optional[int], Decimal]:
    """Sum attributed amounts per category."""
    totals: dict[Optional[int], Decimal] = defaultdict(Decimal)
    for category_id, amount in iter_attributions(transactions, splits_by_transaction):
        totals[category_id] += amount
    return dict(totals)


class SplitService:
    """Service maintaining the parent amount / split sum invariant."""

    def __init__(self, store: LedgerStore):
        """Initialize split service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def _get_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        txn = self.store.get_transaction(transaction_id, user_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _check_category(self, user_id: str, category_id: Optional[int]) -> None:
        if category_id is not None and self.store.get_category(category_id, user_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def get_splits(self, user_id: str, transaction_id: int) -> list[TransactionSplit]:
        """Get all splits for a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist for the user
        """
        self._get_transaction(user_id, transaction_id)
        return self.store.list_splits(transaction_id)

    def split(
        self,
        user_id: str,
        transaction_id: int,
        items: Sequence[Union[SplitItem, Mapping[str, Any]]],
    ) -> list[TransactionSplit]:
        """Split a transaction into multiple category allocations.

        Existing splits are replaced. The transaction is flagged as split and
        loses its own category.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction to split
            items: Split items, or mappings with category_id/amount/description

        Returns:
            The newly created splits

        Raises:
            NotFoundError: If the transaction or a referenced category doesn't exist
            ValidationError: If fewer than 2 items are given or the amounts
                don't add up to the transaction amount
        """
        split_items = [
            item if isinstance(item, SplitItem) else SplitItem.from_mapping(item)
            for item in items
        ]
        txn = self._get_transaction(user_id, transaction_id)

        if len(split_items) < MIN_SPLIT_PARTS:
            raise ValidationError(split_too_few_parts(len(split_items)))

        split_total = sum((item.amount for item in split_items), Decimal("0"))
        if not amounts_match(split_total, txn.amount):
            raise ValidationError(split_sum_mismatch(split_total, txn.amount))

        for category_id in {item.category_id for item in split_items}:
            self._check_category(user_id, category_id)

        with self.store.unit_of_work():
            splits = self.store.replace_splits(transaction_id, split_items)
            self.store.set_transaction_category_and_split_flag(
                transaction_id, category_id=None, is_split=True
            )

        logger.info("Split transaction %d into %d parts", transaction_id, len(splits))
        return splits

    def unsplit(
        self, user_id: str, transaction_id: int, category_id: Optional[int] = None
    ) -> Transaction:
        """Remove all splits from a transaction.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction to unsplit
            category_id: Category to assign afterwards, or None

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction or category doesn't exist
            ValidationError: If the transaction is not split
        """
        txn = self._get_transaction(user_id, transaction_id)
        if not txn.is_split:
            raise ValidationError(transaction_not_split(transaction_id))
        self._check_category(user_id, category_id)

        with self.store.unit_of_work():
            self.store.replace_splits(transaction_id, [])
            self.store.set_transaction_category_and_split_flag(
                transaction_id, category_id=category_id, is_split=False
            )

        logger.info("Unsplit transaction %d", transaction_id)
        return self._get_transaction(user_id, transaction_id)

    def update_split(
        self,
        user_id: str,
        split_id: int,
        patch: Union[SplitPatch, Mapping[str, Any]],
    ) -> TransactionSplit:
        """Update a single split.

        A new amount is checked against the parent by recomputing the total
        of all sibling splits with this split's amount replaced.

        Raises:
            NotFoundError: If the split, its transaction, or the category doesn't exist
            ValidationError: If the new amount breaks the split sum
        """
        if not isinstance(patch, SplitPatch):
            patch = SplitPatch.from_mapping(patch)

        split = self.store.get_split(split_id)
        if split is None:
            raise NotFoundError(split_not_found(split_id))
        # Ownership is checked through the parent transaction
        txn = self.store.get_transaction(split.transaction_id, user_id)
        if txn is None:
            raise NotFoundError(split_not_found(split_id))

        category_id = split.category_id
        if patch.clear_category:
            category_id = None
        elif patch.category_id is not None:
            self._check_category(user_id, patch.category_id)
            category_id = patch.category_id

        amount = split.amount
        if patch.amount is not None:
            siblings = self.store.list_splits(split.transaction_id)
            new_total = sum(
                (patch.amount if s.id == split.id else s.amount for s in siblings),
                Decimal("0"),
            )
            if not amounts_match(new_total, txn.amount):
                raise ValidationError(split_sum_mismatch(new_total, txn.amount))
            amount = patch.amount

        description = split.description
        if patch.update_description or patch.description is not None:
            description = patch.description

        with self.store.unit_of_work():
            updated = self.store.update_split(split_id, category_id, amount, description)

        logger.info("Updated split %d of transaction %d", split_id, split.transaction_id)
        return updated
