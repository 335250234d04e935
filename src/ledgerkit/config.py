"""Configuration settings for the ledgerkit engine."""

from decimal import Decimal
from pathlib import Path

# Paths
DB_PATH_ENV_VAR = "LEDGERKIT_DB_PATH"
USER_ENV_VAR = "LEDGERKIT_USER"
DATA_DIR = Path.home() / ".ledgerkit"
DB_FILENAME = "ledgerkit.db"
DEFAULT_USER = "default"

# Transfer matching
DEFAULT_DATE_WINDOW_DAYS = 3
DEFAULT_MATCH_BATCH_SIZE = 100

# Split invariant tolerance
AMOUNT_EPSILON = Decimal("0.01")

# Reports
DEFAULT_VENDOR_LIMIT = 15
DEFAULT_COMBINATION_LIMIT = 50
DEFAULT_MIN_COMBINATION_SIZE = 2
UNKNOWN_VENDOR = "Unknown"

# Budget alert thresholds (fraction of budget spent)
WARNING_THRESHOLD = Decimal("0.80")
DANGER_THRESHOLD = Decimal("1.00")


def ensure_data_dir() -> Path:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return DATA_DIR
