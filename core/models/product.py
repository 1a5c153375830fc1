# =============================================================================
# core/models/product.py - Product Catalog
# =============================================================================
# The product master and the per-sheet price table used to price orders.
#
# Strawberries are ordered in sheets; the unit price of a sheet depends on
# how many pieces (berries) it holds. Products carry a season, and winter
# products are only sold in multiples of four sheets.
# =============================================================================

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field


class Season(str, Enum):
    """Growing season of a product."""
    SUMMER = "summer"
    SUMMER_AUTUMN = "summer_autumn"
    WINTER = "winter"


class Product(BaseModel):
    """
    One entry of the product master.

    Example:
        {
            "id": "p3",
            "name": "Winter strawberries",
            "code": "winter",
            "season": "winter",
            "unit_price": 1000,
            "tax_rate": 8
        }
    """

    id: str = Field(..., description="Product ID sent by the order form")
    name: str = Field(..., description="Display name")
    code: str = Field(..., description="Stable product code")
    season: Season = Field(..., description="Growing season")

    # Yen, tax excluded
    unit_price: int = Field(..., ge=0, description="Master price per sheet (tax excluded)")

    # Percent, e.g. 8 for 8 %
    tax_rate: int = Field(..., ge=0, le=100, description="Tax rate in percent")

    model_config = {"frozen": True}

    @property
    def is_winter(self) -> bool:
        return self.season == Season.WINTER


class ProductList(BaseModel):
    """Response of GET /products."""
    products: list[Product] = Field(default_factory=list)
    pieces_per_sheet_options: list[int] = Field(default_factory=list)
    min_delivery_date: date | None = Field(
        default=None, description="Earliest delivery date accepted today"
    )


# -----------------------------------------------------------------------------
# Master Data
# -----------------------------------------------------------------------------

PRODUCTS: tuple[Product, ...] = (
    Product(
        id="p1",
        name="Summer strawberries",
        code="summer",
        season=Season.SUMMER,
        unit_price=800,
        tax_rate=8,
    ),
    Product(
        id="p2",
        name="Summer-autumn strawberries",
        code="summer-autumn",
        season=Season.SUMMER_AUTUMN,
        unit_price=900,
        tax_rate=8,
    ),
    Product(
        id="p3",
        name="Winter strawberries",
        code="winter",
        season=Season.WINTER,
        unit_price=1000,
        tax_rate=8,
    ),
    Product(
        id="p4",
        name="Premium strawberry assortment",
        code="premium-mix",
        season=Season.SUMMER_AUTUMN,
        unit_price=1500,
        tax_rate=8,
    ),
)

# Price per sheet (yen, tax excluded) keyed by pieces per sheet
SHEET_PRICES: dict[int, int] = {
    20: 1296,
    24: 1188,
    30: 1080,
    36: 1300,
}


def pieces_per_sheet_options() -> list[int]:
    """Allowed pieces-per-sheet values, largest first (form order)."""
    return sorted(SHEET_PRICES, reverse=True)


def find_product(product_id: str | None) -> Product | None:
    """Look up a product by ID; None for unknown IDs."""
    if not product_id:
        return None
    return next((p for p in PRODUCTS if p.id == product_id), None)
