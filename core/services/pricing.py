# =============================================================================
# core/services/pricing.py - Order Pricing
# =============================================================================
# Unit price and tax rate resolution, and subtotal / tax / total math.
#
# Resolution order for both values:
#   explicit value -> sheet price table (by pieces per sheet) -> product master
# All amounts are whole yen; tax is rounded half up.
# =============================================================================

from dataclasses import dataclass
from decimal import Decimal

from app.config import settings
from core.models.product import Product, SHEET_PRICES
from lib.utils import round_half_up


@dataclass(frozen=True)
class OrderTotals:
    """Computed amounts; a field is None when its inputs are missing."""
    subtotal: int | None = None
    tax_amount: int | None = None
    total_amount: int | None = None

    def as_row(self) -> dict[str, int | None]:
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }


def resolve_unit_price(
    explicit: int | None,
    pieces_per_sheet: int | None,
    product: Product | None = None,
) -> int | None:
    if explicit is not None:
        return explicit
    if pieces_per_sheet in SHEET_PRICES:
        return SHEET_PRICES[pieces_per_sheet]
    if product is not None:
        return product.unit_price
    return None


def resolve_tax_rate(
    explicit: int | None,
    pieces_per_sheet: int | None,
    product: Product | None = None,
) -> int | None:
    if explicit is not None:
        return explicit
    if pieces_per_sheet in SHEET_PRICES:
        return settings.DEFAULT_TAX_RATE
    if product is not None:
        return product.tax_rate
    return None


def calculate_totals(
    unit_price: int | None,
    quantity: int | None,
    tax_rate: int | None,
) -> OrderTotals:
    """
    Compute subtotal, tax and total.

    Example:
        calculate_totals(1296, 4, 10)
        # OrderTotals(subtotal=5184, tax_amount=518, total_amount=5702)
    """
    if unit_price is None or quantity is None:
        return OrderTotals()

    subtotal = unit_price * quantity
    if tax_rate is None:
        return OrderTotals(subtotal=subtotal)

    tax_amount = round_half_up(Decimal(subtotal * tax_rate) / 100)
    return OrderTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total_amount=subtotal + tax_amount,
    )
