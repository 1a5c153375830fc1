# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - product.py: Product master and sheet price table
# - order.py: Order schemas and status enum
# - user.py: Admin user / agency schemas
# - backfill.py: Backfill result counts
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Product Models - Catalog and prices
# -----------------------------------------------------------------------------
from .product import (
    PRODUCTS,
    SHEET_PRICES,
    Product,
    ProductList,
    Season,
    find_product,
    pieces_per_sheet_options,
)

# -----------------------------------------------------------------------------
# Order Models - Intake and admin review
# -----------------------------------------------------------------------------
from .order import (
    Order,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDeleteResponse,
    OrderList,
    OrderStatus,
    OrderUpdateRequest,
    OrderUpdateResponse,
)

# -----------------------------------------------------------------------------
# User Models - Admin user management
# -----------------------------------------------------------------------------
from .user import (
    AdminUser,
    AdminUserList,
    Agency,
    AgencyAssignRequest,
    CurrentUser,
    Role,
    RoleUpdateRequest,
    UserCreateRequest,
    UserCreateResponse,
    UserUpdateRequest,
    UserUpdateResponse,
)

# -----------------------------------------------------------------------------
# Maintenance Models
# -----------------------------------------------------------------------------
from .backfill import BackfillResult

__all__ = [
    # Product
    "PRODUCTS",
    "SHEET_PRICES",
    "Product",
    "ProductList",
    "Season",
    "find_product",
    "pieces_per_sheet_options",
    # Order
    "Order",
    "OrderCreateRequest",
    "OrderCreateResponse",
    "OrderDeleteResponse",
    "OrderList",
    "OrderStatus",
    "OrderUpdateRequest",
    "OrderUpdateResponse",
    # User
    "AdminUser",
    "AdminUserList",
    "Agency",
    "AgencyAssignRequest",
    "CurrentUser",
    "Role",
    "RoleUpdateRequest",
    "UserCreateRequest",
    "UserCreateResponse",
    "UserUpdateRequest",
    "UserUpdateResponse",
    # Maintenance
    "BackfillResult",
]
