"""Database layer for ledgerkit."""

from ledgerkit.database.base import LedgerStore
from ledgerkit.database.factories import create_sqlite_store

__all__ = ["LedgerStore", "create_sqlite_store"]
