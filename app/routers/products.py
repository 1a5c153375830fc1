# =============================================================================
# app/routers/products.py - Product Catalog Endpoint
# =============================================================================
# Serves the product master, the pieces-per-sheet options and the earliest
# delivery date for the order form. Public: the catalog carries no
# customer data.
# =============================================================================

from fastapi import APIRouter

from core.models.product import PRODUCTS, ProductList, pieces_per_sheet_options
from core.services.calendar import business_today
from core.services.validation import minimum_delivery_date

router = APIRouter()


@router.get("", response_model=ProductList)
async def list_products():
    """List orderable products, pieces-per-sheet options and the earliest delivery date."""
    return ProductList(
        products=list(PRODUCTS),
        pieces_per_sheet_options=pieces_per_sheet_options(),
        min_delivery_date=minimum_delivery_date(business_today()),
    )
