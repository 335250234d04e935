"""Abstract ledger store interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerkit.domain.entities import (
    Account,
    BudgetPeriod,
    CandidateQuery,
    Category,
    CategoryType,
    LedgerCursor,
    SplitItem,
    Tag,
    TagSet,
    Transaction,
    TransactionQuery,
    TransactionSplit,
    TransactionType,
)


class LedgerStore(ABC):
    """Abstract persistence port consumed by the ledger services.

    Methods that take ``user_id`` only see rows owned by that user; rows of
    other users behave as if they did not exist.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Scope for a group of writes.

        Commits when the block exits normally and rolls back every write made
        inside it when the block raises.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(self, user_id: str, name: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, user_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        user_id: str,
        name: str,
        category_type: CategoryType = CategoryType.EXPENSE,
        budget_amount: Optional[Decimal] = None,
        budget_period: Optional[BudgetPeriod] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int, user_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """List all categories for a user, ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        date: date,
        amount: Decimal,
        type: TransactionType,
        description: Optional[str] = None,
        vendor: Optional[str] = None,
        category_id: Optional[int] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        import_id: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, user_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def get_transactions_by_ids(
        self, transaction_ids: Iterable[int], user_id: str
    ) -> dict[int, Transaction]:
        """Batch fetch transactions. Missing IDs are absent from the result."""
        pass

    @abstractmethod
    def list_transactions(self, query: TransactionQuery) -> list[Transaction]:
        """List transactions matching a query, ordered by date then ID."""
        pass

    @abstractmethod
    def list_unlinked_transactions(
        self, user_id: str, cursor: Optional[LedgerCursor], limit: int
    ) -> tuple[list[Transaction], Optional[LedgerCursor]]:
        """List one page of unlinked transactions after ``cursor``.

        Pages follow (date, id) ascending order. The returned cursor is None
        once the last page has been delivered.
        """
        pass

    @abstractmethod
    def set_transaction_category_and_split_flag(
        self, transaction_id: int, category_id: Optional[int], is_split: bool
    ) -> None:
        """Set a transaction's category and split flag together."""
        pass

    # Transfer links
    @abstractmethod
    def find_transfer_candidates(self, query: CandidateQuery) -> list[Transaction]:
        """Find unlinked transactions that could be the other side of a transfer.

        Results are ordered by date then ID.
        """
        pass

    @abstractmethod
    def set_link(self, transaction_id: int, partner_id: Optional[int]) -> None:
        """Set or clear one side of a transfer link.

        Setting a partner is a compare-and-set that only succeeds while the
        transaction is unlinked.

        Raises:
            ConflictError: If a partner is being set and one is already present
            NotFoundError: If the transaction does not exist
        """
        pass

    # Split operations
    @abstractmethod
    def get_split(self, split_id: int) -> Optional[TransactionSplit]:
        """Get a split by ID."""
        pass

    @abstractmethod
    def list_splits(self, transaction_id: int) -> list[TransactionSplit]:
        """List splits of a transaction ordered by ID."""
        pass

    @abstractmethod
    def list_splits_for_transactions(
        self, transaction_ids: Iterable[int]
    ) -> dict[int, list[TransactionSplit]]:
        """Batch fetch splits keyed by transaction ID."""
        pass

    @abstractmethod
    def replace_splits(
        self, transaction_id: int, items: Sequence[SplitItem]
    ) -> list[TransactionSplit]:
        """Delete every split of a transaction and insert ``items``."""
        pass

    @abstractmethod
    def update_split(
        self,
        split_id: int,
        category_id: Optional[int],
        amount: Decimal,
        description: Optional[str],
    ) -> TransactionSplit:
        """Overwrite the mutable fields of a split."""
        pass

    # Tag operations
    @abstractmethod
    def create_tag_set(
        self, category_id: int, name: str, description: Optional[str] = None
    ) -> int:
        """Create a tag set. Returns tag set ID."""
        pass

    @abstractmethod
    def create_tag(self, tag_set_id: int, name: str, color: Optional[str] = None) -> int:
        """Create a tag. Returns tag ID."""
        pass

    @abstractmethod
    def get_tag_set(self, tag_set_id: int, user_id: str) -> Optional[TagSet]:
        """Get tag set by ID."""
        pass

    @abstractmethod
    def list_tag_sets(self, category_id: int) -> list[TagSet]:
        """List tag sets of a category."""
        pass

    @abstractmethod
    def list_tags(self, tag_set_id: int) -> list[Tag]:
        """List tags of a tag set ordered by ID."""
        pass

    @abstractmethod
    def get_tags_by_ids(self, tag_ids: Iterable[int]) -> dict[int, Tag]:
        """Batch fetch tags keyed by ID."""
        pass

    @abstractmethod
    def get_transaction_tag_ids(
        self, transaction_ids: Iterable[int]
    ) -> dict[int, tuple[int, ...]]:
        """Batch fetch sorted tag IDs keyed by transaction ID.

        Transactions without tags are absent from the result.
        """
        pass

    @abstractmethod
    def set_transaction_tags(self, transaction_id: int, tag_ids: Sequence[int]) -> None:
        """Replace the tags of a transaction."""
        pass
