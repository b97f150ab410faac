"""Service layer that runs the balance pipeline over a group ledger.

The core modules are pure; this is where a ledger snapshot is loaded, the
pipeline is composed, and data-integrity problems are logged.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError

from .balances import calculate_balances_with_settlements, summarize_group_balances
from .config import Settings
from .exceptions import LedgerFileError
from .models import GroupBalanceSummary, Ledger, Split, SuggestedTransaction
from .money import is_settled, to_cents
from .simplifier import find_residuals, simplify_debts
from .splits import MethodData, calculate_splits

logger = logging.getLogger(__name__)


def load_ledger(path: Path) -> Ledger:
    """
    Read a JSON ledger snapshot from disk.

    Raises:
        LedgerFileError: If the file is missing or doesn't match the Ledger model
    """
    try:
        return Ledger.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise LedgerFileError(str(path), f"Could not read ledger {path}: {e}") from e
    except ValidationError as e:
        raise LedgerFileError(str(path), f"Invalid ledger {path}:\n{e}") from e


def find_unknown_members(ledger: Ledger) -> set[str]:
    """Member ids referenced by expenses or settlements but not in the member list."""
    known = {member.id for member in ledger.members}
    referenced: set[str] = set()
    for expense in ledger.expenses:
        referenced.add(expense.payer_id)
        referenced.update(split.member_id for split in expense.splits)
    for settlement in ledger.settlements:
        referenced.add(settlement.from_member_id)
        referenced.add(settlement.to_member_id)
    return referenced - known


class LedgerService:
    """Computes balances and settle-up suggestions for a group ledger."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def home_currency(self, ledger: Ledger) -> str:
        """The ledger's own home currency, else the configured default."""
        return (ledger.home_currency or self.settings.home_currency).upper()

    def compute_balances(self, ledger: Ledger) -> dict[str, Decimal]:
        """
        Compute every member's net balance.

        Logs a warning when expenses or settlements reference unknown members
        or when the balances don't sum to zero.
        """
        unknown = find_unknown_members(ledger)
        if unknown:
            logger.warning(
                f"Ledger references {len(unknown)} unknown member(s), "
                f"skipped in balances: {', '.join(sorted(unknown))}"
            )

        balances = calculate_balances_with_settlements(
            ledger.expenses,
            ledger.settlements,
            ledger.members,
            self.home_currency(ledger),
        )

        total = sum(balances.values(), Decimal("0"))
        if not is_settled(to_cents(total)):
            logger.warning(f"Balances sum to {total} instead of zero")

        logger.info(
            f"Computed balances for {len(balances)} members from "
            f"{len(ledger.expenses)} expenses and {len(ledger.settlements)} settlements"
        )
        return balances

    def suggest_settlements(
        self, ledger: Ledger, balances: Mapping[str, Decimal] | None = None
    ) -> tuple[list[SuggestedTransaction], dict[str, Decimal]]:
        """
        Suggest payments that would settle the group.

        Args:
            ledger: Group snapshot
            balances: Precomputed balances (computed from ledger if omitted)

        Returns:
            Tuple of (suggested transactions, residual balances). Residuals are
            non-empty only when the ledger is internally inconsistent.
        """
        if balances is None:
            balances = self.compute_balances(ledger)

        transactions = simplify_debts(balances, ledger.members)
        residuals = find_residuals(balances, transactions)

        if residuals:
            logger.warning(
                "Suggested settlements leave residual balances: "
                + ", ".join(f"{mid}={amount}" for mid, amount in residuals.items())
            )

        logger.info(f"Suggested {len(transactions)} settlement transactions")
        return transactions, residuals

    def summarize(
        self, ledger: Ledger, balances: Mapping[str, Decimal] | None = None
    ) -> GroupBalanceSummary:
        """Group balance summary with owed/owing totals."""
        if balances is None:
            balances = self.compute_balances(ledger)
        return summarize_group_balances(
            balances, ledger.members, expense_count=len(ledger.expenses)
        )

    def create_splits(
        self,
        amount: Decimal,
        method: str,
        participant_ids: Iterable[str] | None,
        method_data: MethodData | None = None,
    ) -> list[Split]:
        """Calculate splits for a new expense; raises SplitValidationError on bad input."""
        splits = calculate_splits(amount, method, participant_ids, method_data)
        logger.info(f"Split {amount} by {method} between {len(splits)} members")
        return splits
