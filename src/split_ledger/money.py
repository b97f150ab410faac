"""Integer-cent arithmetic shared by the split, currency and balance modules.

Amounts cross the package boundary as ``Decimal`` display units (dollars,
euros, ...). Everything in between works on integer cents so that repeated
division can never leave a total off by a cent.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

CENT = Decimal("0.01")

# Balances within one cent of zero count as settled.
EPSILON_CENTS = 1
EPSILON = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a user-supplied number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_cents(amount: Decimal | int | float | str) -> int:
    """
    Convert display units to integer cents.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount in display units

    Returns:
        Amount in cents (integer)
    """
    cents = to_decimal(amount) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal."""
    return (Decimal(cents) / 100).quantize(CENT)


def round_half_up(value: Fraction) -> int:
    """Round an exact fraction of cents to the nearest cent, halves away from zero."""
    if value < 0:
        return -round_half_up(-value)
    return int(value + Fraction(1, 2))


def allocate_cents(total_cents: int, weights: Sequence[Fraction | Decimal | int]) -> list[int]:
    """
    Split ``total_cents`` proportionally to ``weights`` (largest-remainder method).

    Every portion is first floored to the cent; the cents left over are then
    handed out one at a time to the portions with the largest fractional
    remainder, ties going to the earlier weight. The result always sums to
    ``total_cents`` exactly.

    Args:
        total_cents: Non-negative amount to distribute
        weights: Non-negative weights, at least one of them positive

    Returns:
        One cent amount per weight, in input order
    """
    exact_weights = [Fraction(w) for w in weights]
    weight_sum = sum(exact_weights, Fraction(0))
    if weight_sum <= 0:
        raise ValueError("At least one weight must be positive")

    exact = [Fraction(total_cents) * w / weight_sum for w in exact_weights]
    floors = [int(share) for share in exact]
    leftover = total_cents - sum(floors)

    by_remainder = sorted(
        range(len(exact)), key=lambda i: (-(exact[i] - floors[i]), i)
    )
    for i in by_remainder[:leftover]:
        floors[i] += 1

    return floors


def is_settled(cents: int) -> bool:
    """True when a balance is within epsilon of zero."""
    return abs(cents) <= EPSILON_CENTS
