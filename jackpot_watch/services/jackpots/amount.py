from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

BILLION_IN_MILLIONS = 1000

_TWO_PLACES = Decimal("0.01")
_WHOLE = Decimal("1")


def format_jackpot_display(amount_millions: float) -> str:
    """Render an amount in millions, e.g. 1700 -> "$1.70 Billion", 500 -> "$500 Million"."""
    value = Decimal(str(amount_millions))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two decimals
        ctx.prec = max(28, value.adjusted() + 4)
        if amount_millions >= BILLION_IN_MILLIONS:
            billions = (value / BILLION_IN_MILLIONS).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
            return f"${billions} Billion"
        millions = value.quantize(_WHOLE, rounding=ROUND_HALF_UP)
    return f"${millions} Million"


def dollars_to_millions(amount: float) -> float:
    return amount / 1_000_000
