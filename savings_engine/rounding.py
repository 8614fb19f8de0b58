"""
Rounding & Formatting Policy

Shared numeric contracts for every calculator:
- raw values are coerced to Decimal (anything non-numeric becomes 0)
- rounding is ROUND_HALF_UP, i.e. ties go away from zero
- formatting never raises; NaN/Infinity render as zero
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

_STRIP_CHARS = ("$", ",", "%", " ")


def to_decimal(value) -> Decimal:
    """Coerce a raw input value to a finite Decimal.

    None, booleans, empty or non-numeric strings, NaN and +/-Infinity all
    become Decimal("0"). Currency and percent decorations ("$1,250.00",
    "3.5%") are stripped before parsing.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        number = value
    else:
        if isinstance(value, str):
            for char in _STRIP_CHARS:
                value = value.replace(char, "")
            if not value:
                return ZERO
        try:
            number = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not number.is_finite():
        return ZERO
    return number


def round_half_up(value, decimals: int) -> Decimal:
    """Round to a fixed number of decimals, ties away from zero.

    Works for any magnitude: the context precision is widened to hold
    every integer digit plus the kept decimals.
    """
    number = to_decimal(value)
    exponent = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        return number.quantize(exponent, rounding=ROUND_HALF_UP)


def quantize_money(value, decimals: int = 2) -> Decimal:
    """Round a currency amount to cents (ROUND_HALF_UP)."""
    return round_half_up(value, decimals)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 instead of raising when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def percent_to_fraction(value) -> Decimal:
    """4 -> Decimal('0.04')"""
    return to_decimal(value) / HUNDRED


def to_money(value) -> float:
    """Convert to float with 2 decimal places for JSON output."""
    return float(quantize_money(value))


def format_currency(value) -> str:
    """Format a number as USD, e.g. "$1,234.56" or "-$12.00"."""
    amount = quantize_money(value)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_percent(value, digits: int = 2) -> str:
    """Format a percent-unit number, e.g. 3.85 -> "3.85%"."""
    return f"{round_half_up(value, digits):.{digits}f}%"


def humanize_program(program_type) -> str:
    """Display name for a program type value."""
    if not program_type:
        return "Fee Recovery Program"

    name = getattr(program_type, "value", program_type)
    mapping = {
        "DUAL_PRICING": "Dual Pricing",
        "CASH_DISCOUNTING": "Cash Discounting",
        "SUPPLEMENTAL_FEE": "Supplemental Fee",
    }
    if name.upper() in mapping:
        return mapping[name.upper()]
    return name.replace("_", " ").title()
