"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is outside the user scope."""


class ConflictError(DomainError):
    """Domain conflict, such as linking a transaction that is already linked."""


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def split_not_found(split_id: int) -> str:
    """Return message for missing split."""
    return f"Split {split_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def tag_set_not_found(tag_set_id: int) -> str:
    """Return message for missing tag set."""
    return f"Tag set {tag_set_id} not found"


def tag_not_found(tag_id: int) -> str:
    """Return message for missing tag."""
    return f"Tag {tag_id} not found"


def split_sum_mismatch(split_total: Decimal, transaction_amount: Decimal) -> str:
    """Return message when split amounts do not add up to the parent amount."""
    return (
        f"Split amounts ({split_total:.2f}) must equal "
        f"transaction amount ({transaction_amount:.2f})"
    )


def split_too_few_parts(count: int) -> str:
    """Return message when fewer than two split parts are supplied."""
    return f"A split transaction must have at least 2 parts (got {count})"


def transaction_not_split(transaction_id: int) -> str:
    """Return message for unsplitting a transaction that has no splits."""
    return f"Transaction {transaction_id} is not split"


def already_linked(transaction_id: int) -> str:
    """Return message when a transaction already has a transfer partner."""
    return f"Transaction {transaction_id} is already linked to another transaction"


def split_amount_negative(amount: Decimal) -> str:
    """Return message for a split line with a negative amount."""
    return f"Split amount ({amount}) must not be negative"


def split_amount_precision(amount: Decimal) -> str:
    """Return message for a split amount finer than a cent."""
    return f"Split amount ({amount}) must have at most 2 decimal places"
