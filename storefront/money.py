"""Money parsing and display formatting."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.config import CURRENCY_SYMBOL

_CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Convert a JSON number (or numeric string) into a Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a monetary amount: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc


def format_money(amount: Decimal, symbol: str = CURRENCY_SYMBOL) -> str:
    """Render an amount as a currency string, e.g. ``$1,234.50``."""
    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def to_wire(amount: Decimal) -> float:
    """Money leaves the process as a JSON number."""
    return float(amount)
