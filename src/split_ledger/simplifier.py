"""Greedy debt simplification.

Matches the largest debtor with the largest creditor until one side runs out.
This is not globally transaction-minimal (that problem is NP-hard for general
debt graphs) but produces at most ``members - 1`` readable suggestions and is
deterministic for identical input.
"""

import heapq
import logging
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal

from .models import Member, SuggestedTransaction
from .money import EPSILON_CENTS, from_cents, is_settled, to_cents

logger = logging.getLogger(__name__)

# (negated cents, tie-break order, member id): heapq pops the largest first
_Position = tuple[int, int, str]


def _member_order(
    balances: Mapping[str, Decimal | int | float], members: Iterable[Member] | None
) -> dict[str, int]:
    """Tie-break order: the member list first, then any other balance keys."""
    ids = [member.id for member in members or []]
    ids.extend(balances.keys())
    return {member_id: i for i, member_id in enumerate(dict.fromkeys(ids))}


def _partition(
    cents: Mapping[str, int], order: Mapping[str, int], tolerance: int = EPSILON_CENTS
) -> tuple[tuple[_Position, ...], tuple[_Position, ...]]:
    """
    Split balances into creditors and debtors, largest first.

    Members within ``tolerance`` cents of zero are left out. Both tuples are
    sorted, so each is already a valid heap.
    """
    creditors = sorted(
        (-balance, order[member_id], member_id)
        for member_id, balance in cents.items()
        if balance > tolerance
    )
    debtors = sorted(
        (balance, order[member_id], member_id)
        for member_id, balance in cents.items()
        if balance < -tolerance
    )
    return tuple(creditors), tuple(debtors)


def _match_and_reduce(
    creditors: tuple[_Position, ...],
    debtors: tuple[_Position, ...],
    tolerance: int = EPSILON_CENTS,
) -> Iterator[tuple[str, str, int]]:
    """Yield (debtor, creditor, cents) until either side is exhausted."""
    creditor_heap = list(creditors)
    debtor_heap = list(debtors)

    while creditor_heap and debtor_heap:
        neg_owed, debtor_order, debtor = heapq.heappop(debtor_heap)
        neg_due, creditor_order, creditor = heapq.heappop(creditor_heap)
        owed, due = -neg_owed, -neg_due

        settle = min(owed, due)
        yield debtor, creditor, settle

        # Whichever side still has a balance goes back in at its new rank
        if owed - settle > tolerance:
            heapq.heappush(debtor_heap, (settle - owed, debtor_order, debtor))
        if due - settle > tolerance:
            heapq.heappush(creditor_heap, (settle - due, creditor_order, creditor))

    for neg_cents, _, member_id in creditor_heap + debtor_heap:
        logger.debug(f"Unmatched balance of {-neg_cents} cents left for {member_id}")


def simplify_debts(
    balances: Mapping[str, Decimal | int | float],
    members: Iterable[Member] | None = None,
) -> list[SuggestedTransaction]:
    """
    Suggest payments that bring every balance to zero.

    Balances within a cent of zero are ignored, unless leaving them out would
    strand a larger balance on the other side: ``{A: 0.02, B: -0.01,
    C: -0.01}`` still yields ``B→A 0.01`` and ``C→A 0.01``.

    Args:
        balances: Member id to net balance (positive = is owed)
        members: Group members; their order breaks ties between equal balances

    Returns:
        Suggested transactions in the order they were matched. Never raises;
        if the balances don't sum to zero the leftover is simply not covered
        (see ``find_residuals``).
    """
    cents = {member_id: to_cents(balance) for member_id, balance in balances.items()}
    order = _member_order(balances, members)

    matched = list(_match_and_reduce(*_partition(cents, order)))
    for debtor, creditor, settle in matched:
        cents[debtor] += settle
        cents[creditor] -= settle

    if any(not is_settled(balance) for balance in cents.values()):
        # Sweep one-cent leftovers into whatever is still outstanding
        matched.extend(_match_and_reduce(*_partition(cents, order, tolerance=0), tolerance=0))

    return [
        SuggestedTransaction(
            from_member_id=debtor, to_member_id=creditor, amount=from_cents(settle)
        )
        for debtor, creditor, settle in matched
    ]


def apply_transactions(
    balances: Mapping[str, Decimal | int | float],
    transactions: Iterable[SuggestedTransaction],
) -> dict[str, Decimal]:
    """
    Balances after the given payments are made.

    A payment works like a settlement record: the payer's balance rises and
    the recipient's falls by the amount paid.
    """
    cents = {member_id: to_cents(balance) for member_id, balance in balances.items()}
    for txn in transactions:
        amount = to_cents(txn.amount)
        cents[txn.from_member_id] = cents.get(txn.from_member_id, 0) + amount
        cents[txn.to_member_id] = cents.get(txn.to_member_id, 0) - amount
    return {member_id: from_cents(value) for member_id, value in cents.items()}


def find_residuals(
    balances: Mapping[str, Decimal | int | float],
    transactions: Iterable[SuggestedTransaction],
) -> dict[str, Decimal]:
    """
    Members whose balance is still outside epsilon after ``transactions``.

    Empty for balances that sum to zero. Anything else points at
    inconsistent inputs upstream (e.g. a split referencing an unknown member).
    """
    remaining = apply_transactions(balances, transactions)
    return {
        member_id: balance
        for member_id, balance in remaining.items()
        if not is_settled(to_cents(balance))
    }
