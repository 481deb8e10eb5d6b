from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from solestyle.config import settings

CENT = Decimal("0.01")


class OrderTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def compute_totals(
    subtotal: Decimal,
    tax_rate: Optional[Decimal] = None,
    shipping: Optional[Decimal] = None,
) -> OrderTotals:
    """Tax is ``tax_rate`` of the subtotal, unrounded; rounding happens on display."""
    if tax_rate is None:
        tax_rate = settings.TAX_RATE
    if shipping is None:
        shipping = settings.SHIPPING_COST
    subtotal = Decimal(subtotal)
    tax = subtotal * Decimal(tax_rate)
    shipping = Decimal(shipping)
    return OrderTotals(subtotal=subtotal, tax=tax, shipping=shipping, total=subtotal + tax + shipping)


def format_money(amount: Decimal) -> str:
    return f"${Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)}"


def tax_label(tax_rate: Optional[Decimal] = None) -> str:
    if tax_rate is None:
        tax_rate = settings.TAX_RATE
    pct = (Decimal(tax_rate) * 100).normalize()
    return f"Tax ({pct:f}%)"
