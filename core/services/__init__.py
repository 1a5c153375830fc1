# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .order_service import OrderService
from .user_service import UserService
from .backfill_service import BackfillService

__all__ = [
    "OrderService",
    "UserService",
    "BackfillService",
]
