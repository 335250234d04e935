"""Transaction tagging domain service."""

import logging
from typing import Sequence

from ledgerkit.database.base import LedgerStore
from ledgerkit.domain.entities import Tag, Transaction
from ledgerkit.domain.errors import (
    NotFoundError,
    ValidationError,
    tag_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class TransactionTagService:
    """Service for attaching tags to transactions."""

    def __init__(self, store: LedgerStore):
        """Initialize tag service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def _get_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        txn = self.store.get_transaction(transaction_id, user_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def set_tags(self, user_id: str, transaction_id: int, tag_ids: Sequence[int]) -> list[Tag]:
        """Replace the tags of a transaction.

        Every tag must belong to a tag set of the transaction's category. An
        empty list removes all tags.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction to tag
            tag_ids: Tag IDs to attach

        Returns:
            The attached tags ordered by ID

        Raises:
            NotFoundError: If the transaction or a tag doesn't exist
            ValidationError: If a tag belongs to another category's tag set
        """
        txn = self._get_transaction(user_id, transaction_id)
        tag_ids = list(dict.fromkeys(tag_ids))

        if tag_ids:
            tags = self.store.get_tags_by_ids(tag_ids)
            for tag_id in tag_ids:
                if tag_id not in tags:
                    raise NotFoundError(tag_not_found(tag_id))

            if txn.category_id is None:
                raise ValidationError("Cannot tag a transaction without a category")
            allowed = {ts.id for ts in self.store.list_tag_sets(txn.category_id)}
            for tag_id in tag_ids:
                if tags[tag_id].tag_set_id not in allowed:
                    raise ValidationError(
                        f"Tag {tag_id} does not belong to a tag set of category {txn.category_id}"
                    )

        with self.store.unit_of_work():
            self.store.set_transaction_tags(transaction_id, tag_ids)

        logger.info("Set %d tags on transaction %d", len(tag_ids), transaction_id)
        return self.get_tags(user_id, transaction_id)

    def get_tags(self, user_id: str, transaction_id: int) -> list[Tag]:
        """Get the tags of a transaction ordered by ID.

        Raises:
            NotFoundError: If the transaction doesn't exist for the user
        """
        self._get_transaction(user_id, transaction_id)
        tag_ids = self.store.get_transaction_tag_ids([transaction_id]).get(transaction_id, ())
        tags = self.store.get_tags_by_ids(tag_ids)
        return [tags[tag_id] for tag_id in sorted(tags)]
