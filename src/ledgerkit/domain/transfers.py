"""Transfer detection and linking domain service."""

import logging
from datetime import timedelta
from typing import Optional

from ledgerkit.config import DEFAULT_DATE_WINDOW_DAYS, DEFAULT_MATCH_BATCH_SIZE
from ledgerkit.database.base import LedgerStore
from ledgerkit.domain.entities import (
    AutoMatch,
    BulkMatchResult,
    CandidateQuery,
    DateRange,
    ReviewGroup,
    Transaction,
)
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    already_linked,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class TransferService:
    """Service for detecting and managing transfer pairs across accounts."""

    def __init__(self, store: LedgerStore):
        """Initialize transfer service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def _get_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        txn = self.store.get_transaction(transaction_id, user_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _candidates_for(
        self, user_id: str, txn: Transaction, date_window_days: int
    ) -> list[Transaction]:
        window = timedelta(days=date_window_days)
        query = CandidateQuery(
            user_id=user_id,
            exclude_id=txn.id,
            account_id=txn.account_id,
            amount=txn.amount,
            type=txn.type.opposite,
            date_range=DateRange(txn.date - window, txn.date + window),
        )
        return self.store.find_transfer_candidates(query)

    def find_candidates(
        self,
        user_id: str,
        transaction_id: int,
        date_window_days: int = DEFAULT_DATE_WINDOW_DAYS,
    ) -> list[Transaction]:
        """Find potential transfer partners for a transaction.

        Candidates live in another account, carry the same amount and the
        opposite type, fall within ``date_window_days`` of the transaction's
        date, and are not linked yet.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction to match
            date_window_days: Days either side of the transaction date

        Returns:
            Candidate transactions ordered by date ascending; empty when the
            transaction is already linked

        Raises:
            NotFoundError: If the transaction doesn't exist for the user
        """
        if date_window_days < 0:
            raise ValidationError("Date window must not be negative")
        txn = self._get_transaction(user_id, transaction_id)
        if txn.linked_transaction_id is not None:
            return []
        return self._candidates_for(user_id, txn, date_window_days)

    def link(
        self, user_id: str, transaction_id: int, target_id: int
    ) -> tuple[Transaction, Transaction]:
        """Link two transactions as a transfer pair.

        Both sides are written in one unit of work; each write only succeeds
        while that side is still unlinked.

        Returns:
            The updated (transaction, target) pair

        Raises:
            NotFoundError: If either transaction doesn't exist for the user
            ValidationError: If the pair cannot be a transfer
            ConflictError: If either side is already linked
        """
        txn = self._get_transaction(user_id, transaction_id)
        target = self._get_transaction(user_id, target_id)

        if txn.id == target.id:
            raise ValidationError("Cannot link a transaction to itself")
        if txn.account_id == target.account_id:
            raise ValidationError("Cannot link transactions from the same account")
        if txn.amount != target.amount:
            raise ValidationError("Cannot link transactions with different amounts")
        if txn.type == target.type:
            raise ValidationError("Cannot link transactions of the same type")
        if txn.linked_transaction_id is not None:
            raise ConflictError(already_linked(txn.id))
        if target.linked_transaction_id is not None:
            raise ConflictError(already_linked(target.id))

        with self.store.unit_of_work():
            self.store.set_link(txn.id, target.id)
            self.store.set_link(target.id, txn.id)

        logger.info("Linked transactions %d and %d", txn.id, target.id)
        return (
            self._get_transaction(user_id, txn.id),
            self._get_transaction(user_id, target.id),
        )

    def unlink(self, user_id: str, transaction_id: int) -> Optional[int]:
        """Unlink a transaction from its transfer partner.

        Returns:
            The former partner's ID, or None if the transaction was not linked

        Raises:
            NotFoundError: If the transaction doesn't exist for the user
        """
        txn = self._get_transaction(user_id, transaction_id)
        partner_id = txn.linked_transaction_id
        if partner_id is None:
            return None

        with self.store.unit_of_work():
            self.store.set_link(txn.id, None)
            partner = self.store.get_transaction(partner_id, user_id)
            # Only clear the partner if it still points back at us
            if partner is not None and partner.linked_transaction_id == txn.id:
                self.store.set_link(partner_id, None)

        logger.info("Unlinked transactions %d and %d", txn.id, partner_id)
        return partner_id

    def bulk_match(
        self,
        user_id: str,
        date_window_days: int = DEFAULT_DATE_WINDOW_DAYS,
        batch_size: int = DEFAULT_MATCH_BATCH_SIZE,
    ) -> BulkMatchResult:
        """Find and link transfer pairs across the whole ledger.

        Unlinked transactions are visited in (date, id) order, one page of
        ``batch_size`` at a time. A transaction with exactly one candidate is
        linked right away, so later transactions see it as taken. One with
        several candidates is returned for review, and it and its candidates
        are reserved for the rest of the pass.

        Returns:
            Auto-matched pairs and groups needing a manual choice
        """
        if batch_size < 1:
            raise ValidationError("Batch size must be at least 1")
        if date_window_days < 0:
            raise ValidationError("Date window must not be negative")

        auto_matched: list[AutoMatch] = []
        needs_review: list[ReviewGroup] = []
        processed_ids: set[int] = set()

        cursor = None
        while True:
            page, cursor = self.store.list_unlinked_transactions(user_id, cursor, batch_size)

            for txn in page:
                # Skip if already handled (it may have been a match for another)
                if txn.id in processed_ids:
                    continue

                candidates = [
                    c
                    for c in self._candidates_for(user_id, txn, date_window_days)
                    if c.id not in processed_ids
                ]
                if not candidates:
                    continue

                if len(candidates) == 1:
                    match = candidates[0]
                    try:
                        linked_txn, linked_match = self.link(user_id, txn.id, match.id)
                    except ConflictError as e:
                        logger.warning("Skipping transfer pair %d/%d: %s", txn.id, match.id, e)
                        continue
                    processed_ids.update((txn.id, match.id))
                    auto_matched.append(AutoMatch(transaction=linked_txn, linked_to=linked_match))
                else:
                    needs_review.append(ReviewGroup(transaction=txn, candidates=tuple(candidates)))
                    processed_ids.add(txn.id)
                    processed_ids.update(c.id for c in candidates)

            if cursor is None:
                break

        logger.info(
            "Bulk match: %d auto-matched, %d need review",
            len(auto_matched),
            len(needs_review),
        )
        return BulkMatchResult(auto_matched=tuple(auto_matched), needs_review=tuple(needs_review))
