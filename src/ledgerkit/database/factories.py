"""Store factory functions for creating ledger store instances."""

import os
from typing import Optional

from ledgerkit import config
from ledgerkit.database.sqlalchemy_store import SQLAlchemyLedgerStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyLedgerStore:
    """Create a SQLite ledger store instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERKIT_DB_PATH
            environment variable, then defaults to ~/.ledgerkit/ledgerkit.db

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(config.DB_PATH_ENV_VAR)

    if database_path is None:
        database_path = str(config.ensure_data_dir() / config.DB_FILENAME)

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyLedgerStore(database_url)
