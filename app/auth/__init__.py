# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus the caller's
# profile (role, agency) for authorization.
#
# Usage:
#   from app.auth import get_current_profile, require_admin
#
#   @router.get("/orders")
#   async def list_orders(user: CurrentUser = Depends(get_current_profile)):
#       ...
# =============================================================================

from app.auth.dependencies import get_current_profile, get_current_user, require_admin
from app.auth.models import AuthUser, ProfileResponse

__all__ = [
    "get_current_user",
    "get_current_profile",
    "require_admin",
    "AuthUser",
    "ProfileResponse",
]
