"""Home-currency normalization using the rate stored with each expense."""

import logging
from decimal import Decimal
from fractions import Fraction

from pydantic import BaseModel

from .money import from_cents, round_half_up, to_cents, to_decimal

logger = logging.getLogger(__name__)


class CurrencyInfo(BaseModel):
    """Display metadata for a currency code."""

    code: str
    symbol: str
    name: str
    decimals: int = 2


SUPPORTED_CURRENCIES: dict[str, CurrencyInfo] = {
    info.code: info
    for info in (
        CurrencyInfo(code="USD", symbol="$", name="US Dollar"),
        CurrencyInfo(code="EUR", symbol="€", name="Euro"),
        CurrencyInfo(code="GBP", symbol="£", name="British Pound"),
        CurrencyInfo(code="CAD", symbol="C$", name="Canadian Dollar"),
        CurrencyInfo(code="AUD", symbol="A$", name="Australian Dollar"),
        CurrencyInfo(code="JPY", symbol="¥", name="Japanese Yen", decimals=0),
        CurrencyInfo(code="INR", symbol="₹", name="Indian Rupee"),
        CurrencyInfo(code="CHF", symbol="CHF", name="Swiss Franc"),
        CurrencyInfo(code="CNY", symbol="¥", name="Chinese Yuan"),
        CurrencyInfo(code="MXN", symbol="$", name="Mexican Peso"),
        CurrencyInfo(code="BRL", symbol="R$", name="Brazilian Real"),
        CurrencyInfo(code="SGD", symbol="S$", name="Singapore Dollar"),
        CurrencyInfo(code="HKD", symbol="HK$", name="Hong Kong Dollar"),
        CurrencyInfo(code="NOK", symbol="kr", name="Norwegian Krone"),
        CurrencyInfo(code="SEK", symbol="kr", name="Swedish Krona"),
        CurrencyInfo(code="DKK", symbol="kr", name="Danish Krone"),
        CurrencyInfo(code="NZD", symbol="NZ$", name="New Zealand Dollar"),
        CurrencyInfo(code="ZAR", symbol="R", name="South African Rand"),
        CurrencyInfo(code="KRW", symbol="₩", name="South Korean Won", decimals=0),
        CurrencyInfo(code="THB", symbol="฿", name="Thai Baht"),
    )
}


def get_currency_info(code: str) -> CurrencyInfo | None:
    """Look up a currency by code (case-insensitive)."""
    return SUPPORTED_CURRENCIES.get(code.upper())


def format_amount(amount: Decimal | int | float, currency_code: str) -> str:
    """
    Format an amount with its currency symbol.

    Zero-decimal currencies (JPY, KRW) are shown without cents; unknown
    codes fall back to the code itself as the symbol.
    """
    info = get_currency_info(currency_code)
    symbol = info.symbol if info else currency_code.upper()
    decimals = info.decimals if info else 2

    value = to_decimal(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def is_home_currency(currency: str | None, home_currency: str) -> bool:
    """An expense with no currency is assumed to be in the home currency."""
    return not currency or currency.upper() == home_currency.upper()


def normalize_cents(
    amount_cents: int,
    currency: str | None,
    exchange_rate_to_home: Decimal | float | None,
    home_currency: str,
) -> int:
    """Cent-level version of ``normalize_amount``."""
    if is_home_currency(currency, home_currency):
        return amount_cents

    rate = to_decimal(exchange_rate_to_home) if exchange_rate_to_home is not None else None
    if rate is None or rate <= 0:
        # Write path always stores a rate; fall back to 1:1 rather than fail
        logger.debug(
            f"No usable exchange rate for {currency} -> {home_currency}, using 1:1"
        )
        return amount_cents

    return round_half_up(Fraction(amount_cents) * Fraction(rate))


def normalize_amount(
    amount: Decimal | int | float | str,
    currency: str | None,
    exchange_rate_to_home: Decimal | float | None,
    home_currency: str,
) -> Decimal:
    """
    Convert an expense amount into the group's home currency.

    Uses the rate captured when the expense was written; never fetches one.

    Args:
        amount: Amount in the expense's currency
        currency: Expense currency code, or None for the home currency
        exchange_rate_to_home: Units of home currency per unit of ``currency``
        home_currency: The group's settlement currency

    Returns:
        Amount in home currency, rounded to the cent. Unchanged when the
        currency is the home currency or no positive rate is stored.
    """
    return from_cents(
        normalize_cents(to_cents(amount), currency, exchange_rate_to_home, home_currency)
    )
