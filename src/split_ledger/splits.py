"""Split calculation for the equal, exact, percent and shares methods.

Every calculator works in integer cents and returns splits whose total equals
the expense amount to the cent. Inputs that cannot produce such a split raise a
``SplitValidationError`` subclass; ``validate_split_data`` reports the same
failures as a ``ValidationResult`` for callers that prefer a value.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import get_args

from .exceptions import (
    InvalidAmount,
    InvalidPercentTotal,
    InvalidSplitMethod,
    InvalidSplitValue,
    MismatchedSplitTotal,
    NegativeSplitValue,
    NoParticipants,
    NoSharesAssigned,
    SplitValidationError,
)
from .models import Split, SplitMethod, ValidationResult
from .money import (
    EPSILON,
    EPSILON_CENTS,
    allocate_cents,
    from_cents,
    round_half_up,
    to_cents,
    to_decimal,
)

logger = logging.getLogger(__name__)

SPLIT_METHODS: tuple[str, ...] = get_args(SplitMethod)

SPLIT_METHOD_LABELS = {
    "equal": "Split Equally",
    "exact": "Exact Amounts",
    "percent": "By Percentage",
    "shares": "By Shares",
}

SPLIT_METHOD_DESCRIPTIONS = {
    "equal": "Everyone pays the same amount",
    "exact": "Enter specific amounts for each person",
    "percent": "Split by percentage (must total 100%)",
    "shares": "Split by shares (e.g., 1x, 2x)",
}

MethodData = Mapping[str, Decimal | int | float | str]


def split_method_label(method: str) -> str:
    """Display name for a split method."""
    return SPLIT_METHOD_LABELS.get(method, "Unknown")


def split_method_description(method: str) -> str:
    """One-line explanation of a split method."""
    return SPLIT_METHOD_DESCRIPTIONS.get(method, "")


def calculate_equal_split(amount_cents: int, participant_ids: list[str]) -> list[int]:
    """
    Divide an amount evenly, giving leftover cents to the first participants.

    Example:
        1000 cents between three people -> [334, 333, 333]
    """
    base, remainder = divmod(amount_cents, len(participant_ids))
    return [base + (1 if i < remainder else 0) for i in range(len(participant_ids))]


def calculate_exact_split(amount_cents: int, values: list[Decimal]) -> list[int]:
    """Use the supplied amounts as-is, absorbing a sub-epsilon difference."""
    cents = [to_cents(value) for value in values]
    return _absorb_residual(amount_cents, cents)


def calculate_percent_split(amount_cents: int, percentages: list[Decimal]) -> list[int]:
    """Round each percentage share half-up to the cent."""
    cents = [
        round_half_up(Fraction(amount_cents) * Fraction(pct) / 100)
        for pct in percentages
    ]
    return _absorb_residual(amount_cents, cents)


def calculate_shares_split(amount_cents: int, share_counts: list[Decimal]) -> list[int]:
    """Split proportionally to share counts using the largest-remainder method."""
    return allocate_cents(amount_cents, share_counts)


def _absorb_residual(amount_cents: int, cents: list[int]) -> list[int]:
    """
    Add whatever rounding left over to the largest split.

    Adjusting the largest split keeps the relative error smallest; ties go
    to the earliest participant.
    """
    residual = amount_cents - sum(cents)
    if residual != 0 and cents:
        largest = max(range(len(cents)), key=lambda i: (cents[i], -i))
        cents[largest] += residual
        logger.debug(f"Applied rounding adjustment of {residual} cents to split {largest}")
    return cents


def _participants(
    participant_ids: Iterable[str] | None, method_data: MethodData | None
) -> list[str]:
    """Participants in input order, de-duplicated; falls back to method_data keys."""
    if participant_ids is None:
        participant_ids = (method_data or {}).keys()
    return list(dict.fromkeys(participant_ids))


def _finite_decimal(value) -> Decimal | None:
    """``value`` as a finite Decimal, or None if it isn't one."""
    try:
        number = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None
    return number if number.is_finite() else None


def _parse_amount(amount) -> Decimal:
    number = _finite_decimal(amount)
    if number is None:
        raise InvalidAmount(f"Amount must be a number (got {amount})")
    return number


def _method_values(participants: list[str], method_data: MethodData | None) -> list[Decimal]:
    """Look up each participant's value; a missing entry counts as zero."""
    data = method_data or {}
    values = []
    for member_id in participants:
        value = _finite_decimal(data.get(member_id, 0))
        if value is None:
            raise InvalidSplitValue(member_id, data.get(member_id))
        if value < 0:
            raise NegativeSplitValue(member_id, value)
        values.append(value)
    return values


def _check(method: str, amount: Decimal, participants: list[str], values: list[Decimal]) -> None:
    """Raise the first validation error the inputs violate."""
    if method not in SPLIT_METHODS:
        raise InvalidSplitMethod(f"Invalid split method: {method!r}")

    if amount <= 0:
        raise InvalidAmount(f"Amount must be greater than zero (got {amount})")

    if not participants:
        raise NoParticipants("Please select at least one person to split with")

    if method == "exact":
        total = sum(values, Decimal("0"))
        total_cents = to_cents(total)
        if total_cents == 0 or abs(total_cents - to_cents(amount)) > EPSILON_CENTS:
            raise MismatchedSplitTotal(
                f"Amounts must add up to {amount:.2f} (currently {total:.2f})"
            )

    elif method == "percent":
        total_percent = sum(values, Decimal("0"))
        if abs(total_percent - 100) > EPSILON:
            raise InvalidPercentTotal(
                f"Percentages must add up to 100% (currently {total_percent:.1f}%)"
            )

    elif method == "shares":
        if sum(values, Decimal("0")) == 0:
            raise NoSharesAssigned("Please assign at least one share")


def validate_split_data(
    method: str,
    amount: Decimal | int | float | str,
    method_data: MethodData | None = None,
    participant_ids: Iterable[str] | None = None,
) -> ValidationResult:
    """
    Check split inputs without computing the split.

    Args:
        method: One of equal, exact, percent, shares
        amount: Expense total
        method_data: Per-member exact amounts, percentages or share counts
        participant_ids: Members to split between (defaults to method_data keys)

    Returns:
        ValidationResult; ``error_code`` matches the exception's ``code``
    """
    try:
        participants = _participants(participant_ids, method_data)
        values = _method_values(participants, method_data) if method != "equal" else []
        _check(method, _parse_amount(amount), participants, values)
    except SplitValidationError as e:
        return ValidationResult(is_valid=False, error_code=e.code, error=str(e))
    return ValidationResult(is_valid=True)


def calculate_splits(
    amount: Decimal | int | float | str,
    method: str,
    participant_ids: Iterable[str] | None,
    method_data: MethodData | None = None,
) -> list[Split]:
    """
    Allocate an expense between participants.

    Args:
        amount: Expense total in display units
        method: One of equal, exact, percent, shares
        participant_ids: Members to split between, in display order
        method_data: Per-member values for exact/percent/shares

    Returns:
        Splits in participant order summing exactly to ``amount``. Under
        exact/percent/shares a participant whose value is zero gets no split.

    Raises:
        SplitValidationError: If the inputs cannot produce a valid split
    """
    amount = _parse_amount(amount)
    participants = _participants(participant_ids, method_data)
    values = _method_values(participants, method_data) if method != "equal" else []
    _check(method, amount, participants, values)

    amount_cents = to_cents(amount)

    if method == "equal":
        cents = calculate_equal_split(amount_cents, participants)
        return [
            Split(member_id=member_id, amount=from_cents(share))
            for member_id, share in zip(participants, cents)
        ]

    # Participants with a zero value are not part of the expense
    involved = [(member_id, value) for member_id, value in zip(participants, values) if value > 0]
    member_ids = [member_id for member_id, _ in involved]
    involved_values = [value for _, value in involved]

    if method == "exact":
        cents = calculate_exact_split(amount_cents, involved_values)
    elif method == "percent":
        cents = calculate_percent_split(amount_cents, involved_values)
    else:
        cents = calculate_shares_split(amount_cents, involved_values)

    splits = [
        Split(member_id=member_id, amount=from_cents(share))
        for member_id, share in zip(member_ids, cents)
    ]

    assert sum(s.amount for s in splits) == from_cents(amount_cents), "Split total drifted"
    return splits
