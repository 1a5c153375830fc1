# =============================================================================
# app/routers/admin_users.py - Admin User Management Endpoints
# =============================================================================
# Accounts, roles and agency membership. Administrators only.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import AdminDep
from core.models.user import (
    AdminUserList,
    AgencyAssignRequest,
    RoleUpdateRequest,
    UserCreateRequest,
    UserCreateResponse,
    UserUpdateRequest,
    UserUpdateResponse,
)
from core.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

UserIdPath = Annotated[str, Path(description="User ID (Supabase Auth UUID)")]


@router.get("", response_model=AdminUserList)
async def list_users(admin: AdminDep):
    """List agencies and users."""
    return UserService.list_users()


@router.post("", response_model=UserCreateResponse)
async def create_user(request: UserCreateRequest, admin: AdminDep):
    """
    Create a user account.

    The response carries the initial password; it is not stored and
    can't be retrieved again.
    """
    logger.info(f"Admin {admin.id} creating user {request.email}")
    return UserService.create_user(request)


@router.put("/{user_id}", response_model=UserUpdateResponse)
async def update_user(user_id: UserIdPath, request: UserUpdateRequest, admin: AdminDep):
    """Update display name, role or agency. agencyId null detaches the user."""
    return UserService.update_user(user_id, request)


@router.patch("/{user_id}/agency", response_model=UserUpdateResponse)
async def assign_agency(user_id: UserIdPath, request: AgencyAssignRequest, admin: AdminDep):
    """Assign an existing agency, or one found or created by name."""
    return UserService.assign_agency(user_id, request)


@router.patch("/{user_id}/role", response_model=UserUpdateResponse)
async def update_role(user_id: UserIdPath, request: RoleUpdateRequest, admin: AdminDep):
    """Change the role. Agency users need an agency; admins lose theirs."""
    return UserService.update_role(user_id, request)


@router.delete("/{user_id}")
async def delete_user(user_id: UserIdPath, admin: AdminDep):
    """Delete the user's profile and auth account."""
    logger.info(f"Admin {admin.id} deleting user {user_id}")
    UserService.delete_user(user_id)
    return {"ok": True}
