"""Domain layer for the ledgerkit engine."""

# Services are imported lazily so database.base can import domain.entities
_SERVICES = {
    "TransferService": "ledgerkit.domain.transfers",
    "SplitService": "ledgerkit.domain.splits",
    "SpendingService": "ledgerkit.domain.spending",
    "BudgetAlertService": "ledgerkit.domain.budget_alerts",
    "TransactionTagService": "ledgerkit.domain.tags",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
