# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the authenticated caller.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel

from core.models.user import Role

ADMIN_LANDING = "/admin/orders"
ORDER_LANDING = "/order"


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: str | None = None

    model_config = {"frozen": True}


class ProfileResponse(BaseModel):
    """
    Response of GET /auth/me.

    landing is the page a client should open after login: the admin
    order table for admins, the order form for everyone else.
    """
    id: UUID
    email: str | None = None
    display_name: str | None = None
    role: Role | None = None
    agency_id: str | None = None
    agency_name: str | None = None
    landing: str = ORDER_LANDING

    @staticmethod
    def landing_for(role: Role | None) -> str:
        return ADMIN_LANDING if role == Role.ADMIN else ORDER_LANDING
