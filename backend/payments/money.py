"""
Integer money helpers.

Every amount in the ordering pipeline is an ``int`` in the currency's minor
unit (paise, cents, ...). Decimals only appear when an amount is shown to a
person; floats never appear.

Key Principles:
1. NEVER use float for money
2. Arithmetic on minor units stays integer; rounding is explicit
3. Decimal conversion happens only at the display edge
"""

from decimal import Decimal
from typing import Iterable

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "INR": 2,  # Indian Rupee (paise)
    "USD": 2,  # United States Dollar (cents)
    "EUR": 2,  # Euro (cents)
    "GBP": 2,  # British Pound (pence)
    "AUD": 2,
    "CAD": 2,
    "SGD": 2,
    "AED": 2,

    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,

    # 3-decimal currencies
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}

CURRENCY_PREFIX = {
    "INR": "Rs. ",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places for a currency; unknown codes default to 2.

    Examples:
        >>> currency_exponent("INR")
        2
        >>> currency_exponent("JPY")
        0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def from_minor(currency: str, minor: int) -> Decimal:
    """
    Convert minor units to a major-unit Decimal for display.

    Examples:
        >>> from_minor("INR", 50000)
        Decimal('500.00')
    """
    exponent = currency_exponent(currency)
    return Decimal(int(minor)).scaleb(-exponent).quantize(Decimal(1).scaleb(-exponent))


def percentage_of(minor: int, percent: int) -> int:
    """
    ``percent``% of ``minor``, rounded half up, in integer arithmetic.

    Examples:
        >>> percentage_of(2000, 20)
        400
        >>> percentage_of(1999, 15)   # 299.85
        300
        >>> percentage_of(1990, 15)   # 298.5
        299
    """
    if minor < 0 or percent < 0:
        raise ValueError("percentage_of expects non-negative operands")
    return (minor * percent + 50) // 100


def sum_minor(amounts: Iterable[int]) -> int:
    total = 0
    for amount in amounts:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError(f"Money amounts must be int minor units, got {type(amount).__name__}")
        total += amount
    return total


def format_money(currency: str, minor: int) -> str:
    """
    Format minor units as a human-readable amount.

    Examples:
        >>> format_money("INR", 50000)
        'Rs. 500.00'
        >>> format_money("USD", 123456)
        '$1,234.56'
        >>> format_money("JPY", 1235)
        '¥1,235'
        >>> format_money("CHF", 1050)
        'CHF 10.50'
    """
    amount = from_minor(currency, minor)
    prefix = CURRENCY_PREFIX.get(currency.upper(), currency.upper() + " ")
    exponent = currency_exponent(currency)
    return f"{prefix}{amount:,.{exponent}f}"
