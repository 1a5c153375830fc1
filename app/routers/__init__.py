# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Product catalog
# - orders.py: Order intake, order tables, admin edits
# - admin_users.py: User / agency management (admin)
# - admin_backfill.py: Data backfill (admin)
# - tasks.py: Background task status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import products
from . import orders
from . import admin_users
from . import admin_backfill
from . import tasks

__all__ = [
    "health",
    "products",
    "orders",
    "admin_users",
    "admin_backfill",
    "tasks",
]
