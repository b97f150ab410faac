"""Rounding and cent allocation tests for the money helpers."""

from decimal import Decimal
from fractions import Fraction

import pytest

from split_ledger.money import (
    allocate_cents,
    from_cents,
    is_settled,
    round_half_up,
    to_cents,
)


class TestToCents:
    """Conversion from display units to integer cents."""

    def test_exact_cents(self):
        assert to_cents(Decimal("12.34")) == 1234

    def test_half_cent_rounds_up(self):
        """ROUND_HALF_UP: 0.005 becomes one cent, not zero."""
        assert to_cents(Decimal("0.005")) == 1
        assert to_cents(Decimal("2.675")) == 268

    def test_negative_half_cent_rounds_away_from_zero(self):
        assert to_cents(Decimal("-0.005")) == -1

    def test_float_input_has_no_binary_artifacts(self):
        """0.1 + 0.2 style floats go through str() first."""
        assert to_cents(0.1) == 10
        assert to_cents(1.15) == 115

    def test_string_and_int_input(self):
        assert to_cents("42.50") == 4250
        assert to_cents(7) == 700


class TestFromCents:
    """Conversion back to two-place Decimals."""

    def test_positive(self):
        assert from_cents(1234) == Decimal("12.34")

    def test_negative(self):
        assert from_cents(-5) == Decimal("-0.05")

    def test_always_two_places(self):
        assert str(from_cents(1000)) == "10.00"


class TestRoundHalfUp:
    """Rounding exact fractions of a cent."""

    def test_half_rounds_up(self):
        assert round_half_up(Fraction(5, 2)) == 3

    def test_negative_half_rounds_away_from_zero(self):
        assert round_half_up(Fraction(-5, 2)) == -3

    def test_below_half_rounds_down(self):
        assert round_half_up(Fraction(7, 3)) == 2


class TestAllocateCents:
    """Largest-remainder allocation."""

    def test_thirds_give_extra_cent_to_first(self):
        """$10.00 in thirds: one participant gets the leftover cent."""
        assert allocate_cents(1000, [1, 1, 1]) == [334, 333, 333]

    def test_leftover_goes_to_largest_remainder(self):
        """33.33 / 66.67 -> the second share has the larger remainder."""
        assert allocate_cents(100, [1, 2]) == [33, 67]

    def test_fractional_weights(self):
        assert allocate_cents(10, [Decimal("1.5"), Decimal("1")]) == [6, 4]

    def test_zero_total(self):
        assert allocate_cents(0, [1, 1]) == [0, 0]

    def test_more_weights_than_cents(self):
        result = allocate_cents(1, [1, 1, 1, 1, 1])
        assert result == [1, 0, 0, 0, 0]

    def test_zero_weight_gets_nothing(self):
        assert allocate_cents(500, [0, 1, 1]) == [0, 250, 250]

    def test_all_zero_weights_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            allocate_cents(100, [0, 0])

    def test_many_weights_sum_exactly(self):
        """Accumulation over many uneven weights never drifts."""
        weights = [Decimal(w) / 7 for w in range(1, 51)]
        result = allocate_cents(123457, weights)
        assert sum(result) == 123457
        assert len(result) == 50


class TestIsSettled:
    """Epsilon comparison."""

    @pytest.mark.parametrize("cents", [0, 1, -1])
    def test_within_epsilon(self, cents):
        assert is_settled(cents)

    @pytest.mark.parametrize("cents", [2, -2, 1000])
    def test_outside_epsilon(self, cents):
        assert not is_settled(cents)
