"""Domain model entities for ledgerkit.

These are pure data classes representing ledger concepts, independent of
database schema. Query and filter objects are immutable so the domain layer
describes *what* to fetch and the store decides *how*.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from ledgerkit.domain.errors import (
    ValidationError,
    split_amount_negative,
    split_amount_precision,
)

CENT = Decimal("0.01")


class TransactionType(str, Enum):
    """Direction of money movement for a transaction."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "TransactionType":
        return TransactionType.CREDIT if self is TransactionType.DEBIT else TransactionType.DEBIT


class CategoryType(str, Enum):
    """Category kind."""

    EXPENSE = "expense"
    INCOME = "income"


class BudgetPeriod(str, Enum):
    """Recurring window a category budget is measured against."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class Severity(str, Enum):
    """Budget status severity."""

    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    user_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with optional budget."""

    id: int
    user_id: str
    name: str
    category_type: CategoryType
    budget_amount: Optional[Decimal]
    budget_period: Optional[BudgetPeriod]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always a non-negative magnitude; ``type`` carries the sign.
    """

    id: int
    account_id: int
    category_id: Optional[int]
    date: date
    description: Optional[str]
    vendor: Optional[str]
    amount: Decimal
    type: TransactionType
    reference: Optional[str]
    notes: Optional[str]
    reconciled: bool
    linked_transaction_id: Optional[int]
    is_split: bool
    import_id: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransactionSplit:
    """One category allocation of a split transaction."""

    id: int
    transaction_id: int
    category_id: Optional[int]
    amount: Decimal
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TagSet:
    """Named tag dimension scoped to a category."""

    id: int
    category_id: int
    name: str
    description: Optional[str]


@dataclass(frozen=True)
class Tag:
    """Tag belonging to exactly one tag set."""

    id: int
    tag_set_id: int
    name: str
    color: Optional[str]


def _to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a boundary value into a Decimal amount."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    return amount


def _to_split_amount(value: Any) -> Decimal:
    """Convert a split amount, which is stored as a non-negative whole-cent value."""
    amount = _to_decimal(value, "amount")
    if amount < 0:
        raise ValidationError(split_amount_negative(amount))
    try:
        cents = amount.quantize(CENT)
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}")
    if amount != cents:
        raise ValidationError(split_amount_precision(amount))
    return cents


def _to_optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    return value


def _reject_unknown_keys(data: Mapping[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError(f"Unknown split fields: {', '.join(unknown)}")


@dataclass(frozen=True)
class SplitItem:
    """Requested allocation for a new split."""

    category_id: Optional[int]
    amount: Decimal
    description: Optional[str] = None

    FIELDS = frozenset({"category_id", "amount", "description"})

    def __post_init__(self):
        object.__setattr__(self, "amount", _to_split_amount(self.amount))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SplitItem":
        """Build a split item from a loosely-typed payload.

        Raises:
            ValidationError: On unknown keys, a missing amount, or bad values
        """
        _reject_unknown_keys(data, set(cls.FIELDS))
        if "amount" not in data:
            raise ValidationError("Split item is missing 'amount'")
        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ValidationError(f"Invalid description: {description!r}")
        return cls(
            category_id=_to_optional_id(data.get("category_id"), "category_id"),
            amount=data["amount"],
            description=description,
        )


@dataclass(frozen=True)
class SplitPatch:
    """Partial update for a single split.

    ``None`` means "leave unchanged"; use ``clear_category`` and
    ``update_description`` to explicitly write null values.
    """

    category_id: Optional[int] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    clear_category: bool = False
    update_description: bool = False

    FIELDS = frozenset({"category_id", "amount", "description"})

    def __post_init__(self):
        if self.clear_category and self.category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")
        if self.amount is not None:
            object.__setattr__(self, "amount", _to_split_amount(self.amount))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SplitPatch":
        """Build a patch from a loosely-typed payload; absent keys are unchanged."""
        _reject_unknown_keys(data, set(cls.FIELDS))
        kwargs: dict[str, Any] = {}
        if "category_id" in data:
            category_id = _to_optional_id(data["category_id"], "category_id")
            if category_id is None:
                kwargs["clear_category"] = True
            else:
                kwargs["category_id"] = category_id
        if "amount" in data:
            if data["amount"] is None:
                raise ValidationError("Invalid amount: None")
            kwargs["amount"] = data["amount"]
        if "description" in data:
            description = data["description"]
            if description is not None and not isinstance(description, str):
                raise ValidationError(f"Invalid description: {description!r}")
            kwargs["description"] = description
            kwargs["update_description"] = True
        return cls(**kwargs)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range."""

    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError(f"Start date {self.start} is after end date {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class TagFilter:
    """OR filter over tag IDs.

    With ``include_untagged`` set, transactions carrying no tags at all are
    admitted as well. An empty ``tag_ids`` tuple disables the filter.
    """

    tag_ids: tuple[int, ...] = ()
    include_untagged: bool = True

    @property
    def is_active(self) -> bool:
        return bool(self.tag_ids)


@dataclass(frozen=True)
class TransactionQuery:
    """Filter parameters for listing a user's transactions."""

    user_id: str
    date_range: Optional[DateRange] = None
    type: Optional[TransactionType] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    is_split: Optional[bool] = None
    tag_filter: Optional[TagFilter] = None


@dataclass(frozen=True)
class CandidateQuery:
    """Parameters for a transfer-candidate search."""

    user_id: str
    exclude_id: int
    account_id: int
    amount: Decimal
    type: TransactionType
    date_range: DateRange


@dataclass(frozen=True, order=True)
class LedgerCursor:
    """Keyset position in the (date, id) ordering of transactions."""

    date: date
    id: int


@dataclass(frozen=True)
class AutoMatch:
    """Transfer pair linked automatically by bulk matching."""

    transaction: Transaction
    linked_to: Transaction


@dataclass(frozen=True)
class ReviewGroup:
    """Transaction with several possible partners awaiting a user choice."""

    transaction: Transaction
    candidates: tuple[Transaction, ...]

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)


@dataclass(frozen=True)
class BulkMatchResult:
    """Outcome of a bulk matching pass."""

    auto_matched: tuple[AutoMatch, ...] = ()
    needs_review: tuple[ReviewGroup, ...] = ()

    @property
    def auto_matched_count(self) -> int:
        return len(self.auto_matched)

    @property
    def needs_review_count(self) -> int:
        return len(self.needs_review)


@dataclass(frozen=True)
class CategoryTotal:
    """Attributed total for one category (``None`` is uncategorized)."""

    category_id: Optional[int]
    total: Decimal
    count: int


@dataclass(frozen=True)
class GroupTotal:
    """Total for a vendor or month grouping key."""

    key: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class CashFlowMonth:
    """Income and expenses for one month."""

    month: str
    income: Decimal
    expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class TagTotal:
    """Total for one tag within a tag set."""

    tag_id: int
    name: str
    color: Optional[str]
    total: Decimal
    count: int
    percentage: Decimal


@dataclass(frozen=True)
class TagCombination:
    """Total for transactions carrying exactly this set of tags."""

    tag_ids: tuple[int, ...]
    tag_names: tuple[str, ...]
    total: Decimal
    count: int


@dataclass(frozen=True)
class CrossTabCell:
    """One populated cell of a tag cross-tabulation."""

    row_tag_id: int
    col_tag_id: int
    total: Decimal
    count: int


@dataclass(frozen=True)
class CrossTabulation:
    """Sparse pivot of spending across two tag sets."""

    tag_set_1: TagSet
    tag_set_2: TagSet
    rows: tuple[Tag, ...]
    columns: tuple[Tag, ...]
    cells: dict[tuple[int, int], CrossTabCell] = field(default_factory=dict)
    row_totals: dict[int, Decimal] = field(default_factory=dict)
    column_totals: dict[int, Decimal] = field(default_factory=dict)
    grand_total: Decimal = Decimal("0")


@dataclass(frozen=True)
class TagTrend:
    """Zero-filled monthly series for one tag."""

    tag: Tag
    months: tuple[GroupTotal, ...]


@dataclass(frozen=True)
class BudgetWindow:
    """Date window of the current budget period."""

    period: BudgetPeriod
    start: date
    end: date
    label: str

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start, self.end)


@dataclass(frozen=True)
class BudgetStatus:
    """Budget evaluation for one category in its current window."""

    category_id: int
    category_name: str
    budget_amount: Decimal
    budget_period: BudgetPeriod
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    severity: Severity
    window: BudgetWindow


@dataclass(frozen=True)
class BudgetSummary:
    """Aggregate totals across all budgeted categories."""

    total_categories: int
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    overall_percentage: Decimal
    over_budget_count: int
    warning_count: int
    on_track_count: int
