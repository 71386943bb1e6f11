"""
Money and tax arithmetic for invoices.

Amounts are plain floats. Tax is truncated with math.floor, never rounded:
a subtotal of 1005 at 10% is taxed 100, not 101. Negative or non-finite
inputs are not rejected here; callers validate if they need to.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from invoice_gen.models.invoice import LineItem


@dataclass(frozen=True, slots=True)
class Totals:
    """Derived invoice totals."""

    subtotal: float
    tax: float
    total: float


def line_amount(quantity: float, unit_price: float) -> float:
    """Return the amount of a single line item."""
    return quantity * unit_price


def compute_tax(subtotal: float, tax_rate: float) -> float:
    """Return floor(subtotal * tax_rate / 100), propagating non-finite bases."""
    base = subtotal * tax_rate / 100
    if not math.isfinite(base):
        return base
    return float(math.floor(base))


def compute_totals(items: Iterable["LineItem"], tax_rate: float) -> Totals:
    """
    Compute subtotal, tax and total for a sequence of line items.

    Each amount is recomputed from quantity and unit price; any amount
    already stored on an item is ignored.

    Args:
        items: Line items in display order.
        tax_rate: Tax rate as a percentage (10 means 10%).

    Returns:
        Totals where total == subtotal + tax.
    """
    subtotal = 0.0
    for item in items:
        subtotal += line_amount(item.quantity, item.unit_price)
    tax = compute_tax(subtotal, tax_rate)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
