"""Money arithmetic: Decimal amounts rounded to the cent, half up."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price) -> Decimal:
    return to_money(Decimal(quantity) * Decimal(unit_price))


def sale_totals(lines: Iterable[Tuple[int, Decimal]], tax_rate) -> Tuple[Decimal, Decimal, Decimal]:
    """(subtotal, tax, total) for (quantity, unit_price) lines."""
    subtotal = to_money(sum((line_subtotal(q, p) for q, p in lines), Decimal("0")))
    tax = to_money(subtotal * Decimal(tax_rate))
    return subtotal, tax, subtotal + tax


def total_for(subtotal, tax_rate) -> Decimal:
    subtotal = to_money(subtotal)
    return subtotal + to_money(subtotal * Decimal(tax_rate))
