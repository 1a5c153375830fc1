# =============================================================================
# core/services/validation.py - Order Business Rules
# =============================================================================
# Server-side checks for a submitted order. The first failing rule is
# reported; the order form runs the same checks before submitting.
#
# Rules:
# - A product must be selected
# - Quantity (sheets) is a positive even number
# - Winter products are ordered in multiples of 4
# - Pieces per sheet is one of the priced options
# - Address, recipient and phone are filled in
# - Delivery date is at least MIN_DELIVERY_LEAD_DAYS days out
# =============================================================================

from datetime import date, timedelta

from app.config import settings
from app.exceptions import OrderValidationError
from core.models.order import OrderCreateRequest
from core.models.product import Product, pieces_per_sheet_options
from lib.utils import clean_text

WINTER_MULTIPLE = 4


def minimum_delivery_date(today: date, lead_days: int | None = None) -> date:
    """Earliest delivery date that can be requested today."""
    if lead_days is None:
        lead_days = settings.MIN_DELIVERY_LEAD_DAYS
    return today + timedelta(days=lead_days)


def is_winter_product(product: Product | None, product_name: str) -> bool:
    """Catalog season is winter, or the submitted name says winter."""
    if product is not None and product.is_winter:
        return True
    return "winter" in product_name.lower()


def parse_delivery_date(value: str) -> date | None:
    """Parse YYYY-MM-DD (a trailing time part is ignored); None if invalid."""
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def validate_new_order(
    request: OrderCreateRequest,
    product: Product | None,
    today: date,
) -> None:
    """
    Check an order submission against the business rules.

    Args:
        request: The submitted order
        product: Catalog entry for request.product_id (None if unknown)
        today: Current business date

    Raises:
        OrderValidationError: On the first rule that fails
    """
    if not clean_text(request.product_id):
        raise OrderValidationError("A product must be selected.", field="product_id")

    quantity = request.quantity
    if not quantity or quantity <= 0 or quantity % 2 != 0:
        raise OrderValidationError(
            "Quantity must be a positive even number.", field="quantity"
        )

    product_name = clean_text(request.product_name) or (product.name if product else "")
    if is_winter_product(product, product_name) and quantity % WINTER_MULTIPLE != 0:
        raise OrderValidationError(
            f"Winter strawberries must be ordered in multiples of {WINTER_MULTIPLE}.",
            field="quantity",
        )

    if request.pieces_per_sheet not in pieces_per_sheet_options():
        raise OrderValidationError(
            "Select the number of pieces per sheet.", field="pieces_per_sheet"
        )

    if not clean_text(request.postal_and_address):
        raise OrderValidationError(
            "Enter the postal code and address.", field="postal_and_address"
        )
    if not clean_text(request.recipient_name):
        raise OrderValidationError(
            "Enter the recipient's name.", field="recipient_name"
        )
    if not clean_text(request.phone_number):
        raise OrderValidationError(
            "Enter a phone number the carrier can reach.", field="phone_number"
        )

    if not clean_text(request.delivery_date):
        raise OrderValidationError("Select a delivery date.", field="delivery_date")

    delivery_date = parse_delivery_date(request.delivery_date)
    if delivery_date is None:
        raise OrderValidationError(
            "Delivery date is not a valid date.", field="delivery_date"
        )

    earliest = minimum_delivery_date(today)
    if delivery_date < earliest:
        raise OrderValidationError(
            f"Delivery date must be on or after {earliest.isoformat()}.",
            field="delivery_date",
        )
