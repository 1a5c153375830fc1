# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_profile, get_current_user
from app.auth.models import AuthUser, ProfileResponse
from core.models.user import CurrentUser
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(
    user: CurrentUser = Depends(get_current_profile)
) -> ProfileResponse:
    """
    Get the current user's profile and where to land after login.

    Raises:
        401: If not authenticated
    """
    display_name = None
    agency_name = None

    try:
        profile = SupabaseClient.fetch_profile(user.id)
        if profile:
            display_name = profile.get("display_name")
        if user.agency_id:
            agency = SupabaseClient.fetch_agency(user.agency_id)
            agency_name = agency.get("name") if agency else None
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch profile details for {user.id}: {e}")

    return ProfileResponse(
        id=user.id,
        email=user.email,
        display_name=display_name,
        role=user.role,
        agency_id=user.agency_id,
        agency_name=agency_name,
        landing=ProfileResponse.landing_for(user.role),
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
