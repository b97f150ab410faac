"""SplitLedger - Group expense balances and debt simplification."""

__version__ = "0.1.0"

from .balances import (
    calculate_balances,
    calculate_balances_with_settlements,
    summarize_group_balances,
)
from .config import Settings, load_settings
from .currency import format_amount, normalize_amount
from .models import (
    Expense,
    GroupBalanceSummary,
    Ledger,
    Member,
    SettlementRecord,
    Split,
    SuggestedTransaction,
    ValidationResult,
)
from .service import LedgerService, load_ledger
from .simplifier import apply_transactions, find_residuals, simplify_debts
from .splits import calculate_splits, validate_split_data

__all__ = [
    "Settings",
    "load_settings",
    "Expense",
    "GroupBalanceSummary",
    "Ledger",
    "Member",
    "SettlementRecord",
    "Split",
    "SuggestedTransaction",
    "ValidationResult",
    "calculate_splits",
    "validate_split_data",
    "normalize_amount",
    "format_amount",
    "calculate_balances",
    "calculate_balances_with_settlements",
    "summarize_group_balances",
    "simplify_debts",
    "apply_transactions",
    "find_residuals",
    "LedgerService",
    "load_ledger",
]
