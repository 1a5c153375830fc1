# =============================================================================
# core/services/user_service.py - Admin User Management
# =============================================================================
# Profiles, roles and agency membership for the admin user table.
# Accounts live in Supabase Auth; profiles (display name, role, agency)
# live in the profiles table keyed by the auth user ID.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import (
    AgencyNotFoundError,
    InvalidRoleError,
    NoUpdatesError,
    OrderDeskException,
    UserNotFoundError,
)
from core.models.user import (
    AdminUser,
    AdminUserList,
    Agency,
    AgencyAssignRequest,
    Role,
    RoleUpdateRequest,
    UserCreateRequest,
    UserCreateResponse,
    UserUpdateRequest,
    UserUpdateResponse,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import clean_text, generate_password, normalize_uuid, slugify

logger = logging.getLogger(__name__)


class UserService:
    """Service for admin user operations."""

    @staticmethod
    def _require_role(value: str | None) -> Role:
        role = Role.parse(value)
        if role is None:
            raise InvalidRoleError(f"Invalid role: {value}", role=value)
        return role

    @staticmethod
    def _require_agency(agency_id: str) -> dict[str, Any]:
        agency = SupabaseClient.fetch_agency(agency_id)
        if not agency:
            raise AgencyNotFoundError(agency_id)
        return agency

    @staticmethod
    def _to_admin_user(
        profile: dict[str, Any] | None,
        agencies: list[dict[str, Any]],
    ) -> AdminUser | None:
        if not profile:
            return None
        auth_email = SupabaseClient.fetch_auth_email(profile["id"])
        return AdminUser.from_profile(profile, agencies, auth_email)

    @staticmethod
    def _reload(user_id: str) -> tuple[AdminUser | None, list[dict[str, Any]]]:
        """Re-read a profile and all agencies after a write."""
        profile = SupabaseClient.fetch_profile(user_id)
        agencies = SupabaseClient.fetch_agencies()
        return UserService._to_admin_user(profile, agencies), agencies

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def list_users() -> AdminUserList:
        """
        List agencies and users with a valid role.

        Emails come from Supabase Auth, falling back to the profile email
        when the lookup fails.
        """
        agencies = SupabaseClient.fetch_agencies()
        profiles = SupabaseClient.fetch_profiles()

        users = [
            user
            for user in (UserService._to_admin_user(p, agencies) for p in profiles)
            if user is not None
        ]
        return AdminUserList(
            agencies=[Agency(**a) for a in agencies],
            users=users,
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @staticmethod
    def create_user(request: UserCreateRequest) -> UserCreateResponse:
        """
        Create an auth account and its profile.

        The account gets a random initial password (returned once) and
        a confirmed email.

        Raises:
            OrderDeskException: If display name, email or role is missing
            InvalidRoleError: If the role is unknown
            AgencyNotFoundError: If agency_id doesn't exist
        """
        display_name = clean_text(request.display_name)
        email = clean_text(request.email)
        if not display_name or not email or not request.role:
            raise OrderDeskException(
                message="Display name, email and role are required",
                code="USER_INVALID",
                status_code=400,
            )

        role = UserService._require_role(request.role)
        agency_id = request.agency_id or None
        if agency_id:
            UserService._require_agency(agency_id)

        password = generate_password()
        user_id = SupabaseClient.create_auth_user(email, password)
        logger.info(f"Created auth user {user_id} ({email})")

        profile = {
            "id": user_id,
            "display_name": display_name,
            "role": role.value,
            "agency_id": agency_id,
            "email": email,
        }
        SupabaseClient.insert_profile(profile)

        agencies = SupabaseClient.fetch_agencies()
        user = UserService._to_admin_user(profile, agencies)
        return UserCreateResponse(user=user, initial_password=password)

    @staticmethod
    def update_user(user_id: str | UUID, request: UserUpdateRequest) -> UserUpdateResponse:
        """
        Apply the fields present in the request to a profile.

        Raises:
            NoUpdatesError: If the request carries no fields
            InvalidRoleError: If the role is unknown
            AgencyNotFoundError: If agency_id doesn't exist
        """
        user_id_str = normalize_uuid(user_id)
        fields = request.model_fields_set
        updates: dict[str, Any] = {}

        if "display_name" in fields and request.display_name is not None:
            updates["display_name"] = request.display_name.strip()

        if request.role:
            updates["role"] = UserService._require_role(request.role).value

        if "agency_id" in fields:
            if request.agency_id:
                UserService._require_agency(request.agency_id)
                updates["agency_id"] = request.agency_id
            else:
                updates["agency_id"] = None

        if not updates:
            raise NoUpdatesError()

        SupabaseClient.update_profile(user_id_str, updates)
        logger.info(f"Updated user {user_id_str}: {sorted(updates)}")

        user, _ = UserService._reload(user_id_str)
        return UserUpdateResponse(user=user)

    @staticmethod
    def _find_or_create_agency(name: str) -> dict[str, Any]:
        agency = SupabaseClient.fetch_agency_by_name(name)
        if agency:
            return agency
        return SupabaseClient.insert_agency(name, slugify(name))

    @staticmethod
    def assign_agency(user_id: str | UUID, request: AgencyAssignRequest) -> UserUpdateResponse:
        """
        Attach a user to an agency.

        With new_agency_name the agency is found by exact name or created.
        Otherwise agency_id (or the current agency when omitted) must exist.

        Raises:
            UserNotFoundError: If the profile doesn't exist
            AgencyNotFoundError: If agency_id doesn't exist
        """
        user_id_str = normalize_uuid(user_id)

        profile = SupabaseClient.fetch_profile(user_id_str)
        if not profile:
            raise UserNotFoundError(user_id_str)

        agency_id = request.agency_id or profile.get("agency_id")

        new_agency_name = clean_text(request.new_agency_name)
        if new_agency_name:
            agency_id = UserService._find_or_create_agency(new_agency_name)["id"]
        elif agency_id:
            UserService._require_agency(agency_id)

        SupabaseClient.update_profile(user_id_str, {"agency_id": agency_id})
        logger.info(f"Assigned user {user_id_str} to agency {agency_id}")

        user, agencies = UserService._reload(user_id_str)
        return UserUpdateResponse(
            user=user,
            agencies=[Agency(**a) for a in agencies],
        )

    @staticmethod
    def update_role(user_id: str | UUID, request: RoleUpdateRequest) -> UserUpdateResponse:
        """
        Change a user's role.

        Agency users must name an agency; admins are detached from theirs.

        Raises:
            InvalidRoleError: If the role is missing or unknown, or an
                agency role comes without an agency
        """
        user_id_str = normalize_uuid(user_id)

        if not request.role:
            raise InvalidRoleError("Role is required")
        role = UserService._require_role(request.role)

        if role == Role.AGENCY:
            if not request.agency_id:
                raise InvalidRoleError("Agency users must belong to an agency", role=role.value)
            updates = {"role": role.value, "agency_id": request.agency_id}
        else:
            updates = {"role": role.value, "agency_id": None}

        SupabaseClient.update_profile(user_id_str, updates)
        logger.info(f"Changed role of user {user_id_str} to {role.value}")

        user, _ = UserService._reload(user_id_str)
        return UserUpdateResponse(user=user)

    @staticmethod
    def delete_user(user_id: str | UUID) -> None:
        """
        Delete a user's profile, then their auth account.

        A failure to delete the auth account is logged; the profile is
        already gone and the call succeeds.
        """
        user_id_str = normalize_uuid(user_id)

        SupabaseClient.delete_profile(user_id_str)
        logger.info(f"Deleted profile {user_id_str}")

        try:
            SupabaseClient.delete_auth_user(user_id_str)
        except SupabaseClientError as e:
            logger.error(f"Auth user deletion failed for {user_id_str} (profile already deleted): {e}")
