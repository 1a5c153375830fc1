# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers as Annotated type aliases.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import get_current_profile, require_admin
from core.models.user import CurrentUser
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_profile)]
AdminDep = Annotated[CurrentUser, Depends(require_admin)]
