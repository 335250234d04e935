"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so string-typed columns become
enums and numeric columns become Decimals before reaching the domain.
"""

from decimal import Decimal
from typing import Optional

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    TransactionSplit as ORMTransactionSplit,
    TagSet as ORMTagSet,
    Tag as ORMTag,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    budget_amount = _decimal(orm_category.budget_amount)
    budget_period = None
    if orm_category.budget_period:
        budget_period = domain.BudgetPeriod(orm_category.budget_period)
    elif budget_amount is not None:
        budget_period = domain.BudgetPeriod.MONTHLY
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.category_type or "expense"),
        budget_amount=budget_amount,
        budget_period=budget_period,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        category_id=orm_transaction.category_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        vendor=orm_transaction.vendor,
        amount=_decimal(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        reference=orm_transaction.reference,
        notes=orm_transaction.notes,
        reconciled=bool(orm_transaction.reconciled),
        linked_transaction_id=orm_transaction.linked_transaction_id,
        is_split=bool(orm_transaction.is_split),
        import_id=orm_transaction.import_id,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def split_to_domain(orm_split: ORMTransactionSplit) -> domain.TransactionSplit:
    """Convert SQLAlchemy TransactionSplit model to domain TransactionSplit entity."""
    return domain.TransactionSplit(
        id=orm_split.id,
        transaction_id=orm_split.transaction_id,
        category_id=orm_split.category_id,
        amount=_decimal(orm_split.amount),
        description=orm_split.description,
        created_at=orm_split.created_at,
    )


def tag_set_to_domain(orm_tag_set: ORMTagSet) -> domain.TagSet:
    """Convert SQLAlchemy TagSet model to domain TagSet entity."""
    return domain.TagSet(
        id=orm_tag_set.id,
        category_id=orm_tag_set.category_id,
        name=orm_tag_set.name,
        description=orm_tag_set.description,
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(
        id=orm_tag.id,
        tag_set_id=orm_tag.tag_set_id,
        name=orm_tag.name,
        color=orm_tag.color,
    )
