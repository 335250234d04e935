"""Shared output formatting for CLI commands."""

from decimal import Decimal

from ledgerkit.domain.entities import Transaction


def format_amount(amount: Decimal) -> str:
    """Format an amount as currency, e.g. ``$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_transaction(txn: Transaction) -> str:
    """One-line transaction description for listings."""
    label = txn.description or txn.vendor or ""
    return (
        f"{txn.id:>6}  {txn.date.isoformat()}  acct {txn.account_id:<4} "
        f"{txn.type.value:<6} {format_amount(txn.amount):>12}  {label}"
    )
