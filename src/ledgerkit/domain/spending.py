"""Spending aggregation and tag reporting domain service.

All reports reduce the rows returned by ``LedgerStore.list_transactions``
in memory. Amounts are attributed to categories through the split rule in
``ledgerkit.domain.splits``, so a split parent is never counted next to
its own split lines.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from ledgerkit.config import (
    DEFAULT_COMBINATION_LIMIT,
    DEFAULT_MIN_COMBINATION_SIZE,
    DEFAULT_VENDOR_LIMIT,
    UNKNOWN_VENDOR,
)
from ledgerkit.database.base import LedgerStore
from ledgerkit.domain.entities import (
    CashFlowMonth,
    CategoryTotal,
    CrossTabCell,
    CrossTabulation,
    DateRange,
    GroupTotal,
    TagCombination,
    TagFilter,
    TagSet,
    TagTotal,
    TagTrend,
    Transaction,
    TransactionQuery,
    TransactionType,
)
from ledgerkit.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    tag_not_found,
    tag_set_not_found,
)
from ledgerkit.domain.splits import iter_attributions

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE_DECIMAL = Decimal("0.1")


def percent(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole`` rounded to one decimal.

    A zero (or negative) whole yields 0.
    """
    if whole <= 0:
        return Decimal("0.0")
    return (part / whole * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def month_key(value: date) -> str:
    """Return the ``YYYY-MM`` key of a date."""
    return value.strftime("%Y-%m")


def iter_months(date_range: DateRange) -> Iterable[date]:
    """Yield the first day of every month touched by a date range."""
    current = date_range.start.replace(day=1)
    while current <= date_range.end:
        yield current
        current += relativedelta(months=1)


class SpendingService:
    """Read-only spending reports over a user's ledger."""

    def __init__(self, store: LedgerStore):
        """Initialize spending service.

        Args:
            store: Ledger store instance
        """
        self.store = store

    def _transactions(
        self,
        user_id: str,
        date_range: DateRange,
        type: Optional[TransactionType] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        is_split: Optional[bool] = None,
        tag_filter: Optional[TagFilter] = None,
    ) -> list[Transaction]:
        if account_id is not None and self.store.get_account(account_id, user_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return self.store.list_transactions(
            TransactionQuery(
                user_id=user_id,
                date_range=date_range,
                type=type,
                account_id=account_id,
                category_id=category_id,
                is_split=is_split,
                tag_filter=tag_filter,
            )
        )

    def _get_tag_set(self, user_id: str, tag_set_id: int) -> TagSet:
        tag_set = self.store.get_tag_set(tag_set_id, user_id)
        if tag_set is None:
            raise NotFoundError(tag_set_not_found(tag_set_id))
        return tag_set

    def _splits_for(self, transactions: list[Transaction]):
        parent_ids = [txn.id for txn in transactions if txn.is_split]
        if not parent_ids:
            return {}
        return self.store.list_splits_for_transactions(parent_ids)

    def category_spending(
        self,
        user_id: str,
        category_id: int,
        date_range: DateRange,
        type: TransactionType = TransactionType.DEBIT,
        tag_filter: Optional[TagFilter] = None,
    ) -> Decimal:
        """Total amount attributed to one category.

        Sums the category's own non-split transactions plus every split line
        in that category whose parent has the given type and falls in range.

        Args:
            user_id: Owner of the ledger
            category_id: Category to total
            date_range: Inclusive date range
            type: Transaction type to count
            tag_filter: Optional tag filter applied to the transactions

        Returns:
            Total as a Decimal; 0 when nothing matches
        """
        direct = self._transactions(
            user_id,
            date_range,
            type=type,
            category_id=category_id,
            is_split=False,
            tag_filter=tag_filter,
        )
        total = sum((txn.amount for txn in direct), ZERO)

        parents = self._transactions(
            user_id, date_range, type=type, is_split=True, tag_filter=tag_filter
        )
        for splits in self._splits_for(parents).values():
            total += sum((s.amount for s in splits if s.category_id == category_id), ZERO)

        logger.debug("Category %d spending in %s: %s", category_id, date_range, total)
        return total

    def spending_by_category(
        self,
        user_id: str,
        date_range: DateRange,
        type: TransactionType = TransactionType.DEBIT,
        tag_filter: Optional[TagFilter] = None,
        account_id: Optional[int] = None,
    ) -> list[CategoryTotal]:
        """Totals per category, largest first.

        Uncategorized amounts are reported under ``category_id=None``.
        """
        transactions = self._transactions(
            user_id, date_range, type=type, account_id=account_id, tag_filter=tag_filter
        )
        totals: dict[Optional[int], Decimal] = defaultdict(Decimal)
        counts: dict[Optional[int], int] = defaultdict(int)
        for category_id, amount in iter_attributions(transactions, self._splits_for(transactions)):
            totals[category_id] += amount
            counts[category_id] += 1

        results = [
            CategoryTotal(category_id=category_id, total=total, count=counts[category_id])
            for category_id, total in totals.items()
        ]
        results.sort(key=lambda r: r.total, reverse=True)
        return results

    def spending_by_vendor(
        self,
        user_id: str,
        date_range: DateRange,
        type: TransactionType = TransactionType.DEBIT,
        account_id: Optional[int] = None,
        limit: int = DEFAULT_VENDOR_LIMIT,
        include_split_parents: bool = False,
    ) -> list[GroupTotal]:
        """Top vendors by total, largest first.

        Transactions without a vendor are grouped under "Unknown". Split
        parents are left out unless ``include_split_parents`` is set.
        """
        if limit < 1:
            raise ValidationError("Limit must be at least 1")

        transactions = self._transactions(
            user_id,
            date_range,
            type=type,
            account_id=account_id,
            is_split=None if include_split_parents else False,
        )
        totals: dict[str, Decimal] = defaultdict(Decimal)
        counts: dict[str, int] = defaultdict(int)
        for txn in transactions:
            vendor = (txn.vendor or "").strip() or UNKNOWN_VENDOR
            totals[vendor] += txn.amount
            counts[vendor] += 1

        results = [
            GroupTotal(key=vendor, total=total, count=counts[vendor])
            for vendor, total in totals.items()
        ]
        results.sort(key=lambda r: r.total, reverse=True)
        return results[:limit]

    def spending_by_month(
        self,
        user_id: str,
        date_range: DateRange,
        type: TransactionType = TransactionType.DEBIT,
        account_id: Optional[int] = None,
        tag_filter: Optional[TagFilter] = None,
        include_split_parents: bool = False,
    ) -> list[GroupTotal]:
        """Totals per ``YYYY-MM`` month, oldest first.

        Only months with transactions are returned. Split parents are left
        out unless ``include_split_parents`` is set.
        """
        transactions = self._transactions(
            user_id,
            date_range,
            type=type,
            account_id=account_id,
            is_split=None if include_split_parents else False,
            tag_filter=tag_filter,
        )
        totals: dict[str, Decimal] = defaultdict(Decimal)
        counts: dict[str, int] = defaultdict(int)
        for txn in transactions:
            key = month_key(txn.date)
            totals[key] += txn.amount
            counts[key] += 1

        return [
            GroupTotal(key=key, total=totals[key], count=counts[key])
            for key in sorted(totals)
        ]

    def cash_flow_by_month(
        self,
        user_id: str,
        date_range: DateRange,
        account_id: Optional[int] = None,
        tag_filter: Optional[TagFilter] = None,
    ) -> list[CashFlowMonth]:
        """Income (credits) and expenses (debits) per month, oldest first.

        Every month of the range is present, including empty ones.
        """
        transactions = self._transactions(
            user_id, date_range, account_id=account_id, tag_filter=tag_filter
        )
        income: dict[str, Decimal] = defaultdict(Decimal)
        expenses: dict[str, Decimal] = defaultdict(Decimal)
        for txn in transactions:
            key = month_key(txn.date)
            if txn.type == TransactionType.CREDIT:
                income[key] += txn.amount
            else:
                expenses[key] += txn.amount

        return [
            CashFlowMonth(
                month=month_key(month),
                income=income.get(month_key(month), ZERO),
                expenses=expenses.get(month_key(month), ZERO),
            )
            for month in iter_months(date_range)
        ]

    def spending_by_tag(
        self,
        user_id: str,
        tag_set_id: int,
        date_range: DateRange,
        type: TransactionType = TransactionType.DEBIT,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> list[TagTotal]:
        """Breakdown of spending across the tags of one tag set.

        A transaction carrying two tags of the set counts toward both. Tags
        without spending are omitted.

        Returns:
            Tag totals, largest first, each with its share of the tag set total

        Raises:
            NotFoundError: If the tag set doesn't exist for the user
        """
        self._get_tag_set(user_id, tag_set_id)
        tags = self.store.list_tags(tag_set_id)
        if not tags:
            return []

        transactions = self._transactions(
            user_id,
            date_range,
            type=type,
            account_id=account_id,
            category_id=category_id,
            tag_filter=TagFilter(tag_ids=tuple(t.id for t in tags), include_untagged=False),
        )
        tag_ids_by_txn = self.store.get_transaction_tag_ids(txn.id for txn in transactions)

        totals: dict[int, Decimal] = defaultdict(Decimal)
        counts: dict[int, int] = defaultdict(int)
        for txn in transactions:
            for tag_id in tag_ids_by_txn.get(txn.id, ()):
                totals[tag_id] += txn.amount
                counts[tag_id] += 1

        grand_total = sum(totals.values(), ZERO)
        results = [
            TagTotal(
                tag_id=tag.id,
                name=tag.name,
                color=tag.color,
                total=totals[tag.id],
                count=counts[tag.id],
                percentage=percent(totals[tag.id], grand_total),
            )
            for tag in tags
            if tag.id in totals
        ]
        results.sort(key=lambda r: r.total, reverse=True)
        return results

    def tag_combinations(
        self,
        user_id: str,
        date_range: DateRange,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        min_size: int = DEFAULT_MIN_COMBINATION_SIZE,
        limit: int = DEFAULT_COMBINATION_LIMIT,
        type: TransactionType = TransactionType.DEBIT,
    ) -> list[TagCombination]:
        """Spending grouped by the exact set of tags on each transaction.

        Only combinations of at least ``min_size`` tags are kept.

        Returns:
            Up to ``limit`` combinations, largest total first
        """
        if min_size < 1:
            raise ValidationError("Minimum combination size must be at least 1")
        if limit < 1:
            raise ValidationError("Limit must be at least 1")

        transactions = self._transactions(
            user_id, date_range, type=type, account_id=account_id, category_id=category_id
        )
        tag_ids_by_txn = self.store.get_transaction_tag_ids(txn.id for txn in transactions)

        totals: dict[tuple[int, ...], Decimal] = defaultdict(Decimal)
        counts: dict[tuple[int, ...], int] = defaultdict(int)
        for txn in transactions:
            combination = tag_ids_by_txn.get(txn.id, ())
            if len(combination) < min_size:
                continue
            totals[combination] += txn.amount
            counts[combination] += 1

        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]
        tags = self.store.get_tags_by_ids({tag_id for combo, _ in ranked for tag_id in combo})
        return [
            TagCombination(
                tag_ids=combo,
                tag_names=tuple(tags[tag_id].name for tag_id in combo if tag_id in tags),
                total=total,
                count=counts[combo],
            )
            for combo, total in ranked
        ]

    def cross_tabulation(
        self,
        user_id: str,
        tag_set_id_1: int,
        tag_set_id_2: int,
        date_range: DateRange,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        type: TransactionType = TransactionType.DEBIT,
    ) -> CrossTabulation:
        """Pivot spending across two tag sets.

        Tags of the first set form the rows and tags of the second set the
        columns. A transaction with several tags from either set counts in
        every (row, column) pair it carries, so the grand total can exceed
        the plain sum of the transactions. Transactions missing a tag from
        either set are left out.

        Raises:
            NotFoundError: If either tag set doesn't exist for the user
        """
        tag_set_1 = self._get_tag_set(user_id, tag_set_id_1)
        tag_set_2 = self._get_tag_set(user_id, tag_set_id_2)
        rows = tuple(self.store.list_tags(tag_set_id_1))
        columns = tuple(self.store.list_tags(tag_set_id_2))
        row_ids = {tag.id for tag in rows}
        column_ids = {tag.id for tag in columns}

        cells: dict[tuple[int, int], CrossTabCell] = {}
        if rows and columns:
            transactions = self._transactions(
                user_id,
                date_range,
                type=type,
                account_id=account_id,
                category_id=category_id,
                tag_filter=TagFilter(tag_ids=tuple(sorted(row_ids)), include_untagged=False),
            )
            tag_ids_by_txn = self.store.get_transaction_tag_ids(txn.id for txn in transactions)

            for txn in transactions:
                tag_ids = tag_ids_by_txn.get(txn.id, ())
                for row_id in (t for t in tag_ids if t in row_ids):
                    for col_id in (t for t in tag_ids if t in column_ids):
                        cell = cells.get((row_id, col_id))
                        cells[(row_id, col_id)] = CrossTabCell(
                            row_tag_id=row_id,
                            col_tag_id=col_id,
                            total=(cell.total if cell else ZERO) + txn.amount,
                            count=(cell.count if cell else 0) + 1,
                        )

        row_totals: dict[int, Decimal] = defaultdict(Decimal)
        column_totals: dict[int, Decimal] = defaultdict(Decimal)
        for (row_id, col_id), cell in cells.items():
            row_totals[row_id] += cell.total
            column_totals[col_id] += cell.total

        return CrossTabulation(
            tag_set_1=tag_set_1,
            tag_set_2=tag_set_2,
            rows=rows,
            columns=columns,
            cells=cells,
            row_totals=dict(row_totals),
            column_totals=dict(column_totals),
            grand_total=sum(row_totals.values(), ZERO),
        )

    def tag_trend_by_month(
        self,
        user_id: str,
        tag_ids: Iterable[int],
        date_range: DateRange,
        account_id: Optional[int] = None,
        type: TransactionType = TransactionType.DEBIT,
    ) -> list[TagTrend]:
        """Monthly totals for each requested tag.

        Every month of the range appears in each series, with zero totals
        for months without spending.

        Raises:
            NotFoundError: If a tag doesn't exist
        """
        tag_ids = tuple(dict.fromkeys(tag_ids))
        if not tag_ids:
            return []
        tags = self.store.get_tags_by_ids(tag_ids)
        for tag_id in tag_ids:
            if tag_id not in tags:
                raise NotFoundError(tag_not_found(tag_id))
        for tag_set_id in {tag.tag_set_id for tag in tags.values()}:
            self._get_tag_set(user_id, tag_set_id)

        transactions = self._transactions(
            user_id,
            date_range,
            type=type,
            account_id=account_id,
            tag_filter=TagFilter(tag_ids=tag_ids, include_untagged=False),
        )
        tag_ids_by_txn = self.store.get_transaction_tag_ids(txn.id for txn in transactions)

        totals: dict[tuple[int, str], Decimal] = defaultdict(Decimal)
        counts: dict[tuple[int, str], int] = defaultdict(int)
        for txn in transactions:
            key = month_key(txn.date)
            for tag_id in tag_ids_by_txn.get(txn.id, ()):
                totals[(tag_id, key)] += txn.amount
                counts[(tag_id, key)] += 1

        months = [month_key(m) for m in iter_months(date_range)]
        return [
            TagTrend(
                tag=tags[tag_id],
                months=tuple(
                    GroupTotal(
                        key=key,
                        total=totals.get((tag_id, key), ZERO),
                        count=counts.get((tag_id, key), 0),
                    )
                    for key in months
                ),
            )
            for tag_id in tag_ids
        ]
