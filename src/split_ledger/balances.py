"""Net balance aggregation over a group's expenses and settlements."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from fractions import Fraction

from .currency import normalize_cents
from .models import (
    Expense,
    GroupBalanceSummary,
    Member,
    MemberBalance,
    SettlementRecord,
)
from .money import allocate_cents, from_cents, round_half_up, to_cents

logger = logging.getLogger(__name__)


def _split_cents(expense: Expense, normalized_cents: int, amount_cents: int) -> list[int]:
    """
    Each split's share of the normalized total, in cents.

    Without conversion the stored split amounts are used as-is. With a
    conversion each split is scaled by ``normalized / amount``; the scaled
    total is rounded once and spread with the largest-remainder method, so
    only rounding is absorbed. Splits that miss the expense amount still
    leave their (scaled) gap in the balances.
    """
    split_cents = [to_cents(split.amount) for split in expense.splits]
    if normalized_cents == amount_cents or sum(split_cents) == 0:
        return split_cents
    scaled_total = round_half_up(Fraction(sum(split_cents) * normalized_cents, amount_cents))
    return allocate_cents(scaled_total, split_cents)


def _apply_expenses(
    balances: dict[str, int], expenses: Iterable[Expense], home_currency: str
) -> None:
    for expense in expenses:
        amount_cents = to_cents(expense.amount)
        normalized_cents = normalize_cents(
            amount_cents, expense.currency, expense.exchange_rate_to_home, home_currency
        )

        # Payer is credited the full (normalized) amount
        if expense.payer_id in balances:
            balances[expense.payer_id] += normalized_cents

        # Each participant is debited their share
        shares = _split_cents(expense, normalized_cents, amount_cents)
        for split, share in zip(expense.splits, shares):
            if split.member_id in balances:
                balances[split.member_id] -= share


def _apply_settlements(
    balances: dict[str, int], settlements: Iterable[SettlementRecord]
) -> None:
    for settlement in settlements:
        amount_cents = to_cents(settlement.amount)
        # The payer has paid down debt; the recipient has been paid back
        if settlement.from_member_id in balances:
            balances[settlement.from_member_id] += amount_cents
        if settlement.to_member_id in balances:
            balances[settlement.to_member_id] -= amount_cents


def calculate_balance_cents(
    expenses: Iterable[Expense],
    settlements: Iterable[SettlementRecord],
    members: Iterable[Member],
    home_currency: str = "USD",
) -> dict[str, int]:
    """Cent-level balances keyed by member id, in member-list order."""
    balances = {member.id: 0 for member in members}
    _apply_expenses(balances, expenses, home_currency)
    _apply_settlements(balances, settlements)
    return balances


def calculate_balances(
    expenses: Iterable[Expense],
    members: Iterable[Member],
    home_currency: str = "USD",
) -> dict[str, Decimal]:
    """Net balances from expenses alone (no settlements applied)."""
    return calculate_balances_with_settlements(expenses, [], members, home_currency)


def calculate_balances_with_settlements(
    expenses: Iterable[Expense],
    settlements: Iterable[SettlementRecord],
    members: Iterable[Member],
    home_currency: str = "USD",
) -> dict[str, Decimal]:
    """
    Fold expenses and settlements into one net balance per member.

    Positive balances are owed money; negative balances owe money. Expenses
    in a foreign currency are converted with their stored rate before being
    applied. References to members not in ``members`` are skipped; callers
    that care can compare the balance sum against zero.

    Args:
        expenses: The group's expenses, each with its stored splits
        settlements: Payments already made between members
        members: The group's members (defines the output keys and order)
        home_currency: Currency all balances are expressed in

    Returns:
        Mapping of member id to balance, rounded to the cent
    """
    cents = calculate_balance_cents(expenses, settlements, members, home_currency)
    return {member_id: from_cents(value) for member_id, value in cents.items()}


def summarize_group_balances(
    balances: Mapping[str, Decimal],
    members: Iterable[Member],
    expense_count: int = 0,
) -> GroupBalanceSummary:
    """Pair each member with their balance and total up who owes and is owed."""
    members = list(members)
    member_balances = [
        MemberBalance(member=member, balance=balances.get(member.id, Decimal("0.00")))
        for member in members
    ]

    total_owed = sum((b for b in balances.values() if b > 0), Decimal("0.00"))
    total_owing = sum((-b for b in balances.values() if b < 0), Decimal("0.00"))

    return GroupBalanceSummary(
        members=member_balances,
        total_owed=total_owed,
        total_owing=total_owing,
        member_count=len(members),
        expense_count=expense_count,
    )
