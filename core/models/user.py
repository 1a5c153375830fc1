# =============================================================================
# core/models/user.py - User & Agency Schemas
# =============================================================================
# Schemas for the admin user table:
# - Role: admin or agency
# - Agency: An ordering agency (reseller)
# - AdminUser: One row of the admin user list
# - Request/response models for the /admin/users endpoints
# =============================================================================

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNNAMED_USER = "(unnamed)"


class Role(str, Enum):
    """
    User roles.

    - admin: Reviews orders and manages users
    - agency: Submits orders on behalf of one agency
    """
    ADMIN = "admin"
    AGENCY = "agency"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """Return the Role for a stored value, None for anything else."""
        try:
            return cls(value)
        except ValueError:
            return None


class Agency(BaseModel):
    """An agency row."""
    id: str
    name: str
    code: str | None = None


class AdminUser(BaseModel):
    """
    One row of the admin user list.

    Built from a profile, its agency and the email known to Supabase Auth.
    """

    id: str
    display_name: str
    email: str | None = None
    role: Role
    agency_id: str | None = None
    agency_name: str | None = None

    @classmethod
    def from_profile(
        cls,
        profile: dict[str, Any],
        agencies: list[dict[str, Any]],
        auth_email: str | None = None,
    ) -> "AdminUser | None":
        """
        Map a profile row; returns None for profiles without a valid role.
        """
        role = Role.parse(profile.get("role"))
        if role is None:
            return None
        agency_id = profile.get("agency_id")
        agency = next((a for a in agencies if a.get("id") == agency_id), None)
        return cls(
            id=str(profile["id"]),
            display_name=profile.get("display_name") or UNNAMED_USER,
            email=auth_email or profile.get("email"),
            role=role,
            agency_id=agency_id,
            agency_name=agency.get("name") if agency else None,
        )


# =============================================================================
# Requests
# =============================================================================

class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreateRequest(_RequestModel):
    """POST /admin/users body."""
    display_name: str | None = None
    email: str | None = None
    role: str | None = None
    agency_id: str | None = None


class UserUpdateRequest(_RequestModel):
    """
    PUT /admin/users/{id} body.

    Only fields present in the request are applied; an explicit
    "agency_id": null detaches the user from their agency.
    """
    display_name: str | None = None
    role: str | None = None
    agency_id: str | None = None


class AgencyAssignRequest(_RequestModel):
    """
    PATCH /admin/users/{id}/agency body.

    new_agency_name wins over agency_id: the agency is looked up by
    name and created when missing.
    """
    agency_id: str | None = None
    new_agency_name: str | None = None


class RoleUpdateRequest(_RequestModel):
    """PATCH /admin/users/{id}/role body."""
    role: str | None = None
    agency_id: str | None = None


# =============================================================================
# Responses
# =============================================================================

class AdminUserList(BaseModel):
    """Response of GET /admin/users."""
    agencies: list[Agency] = Field(default_factory=list)
    users: list[AdminUser] = Field(default_factory=list)


class UserCreateResponse(BaseModel):
    """Response of POST /admin/users."""
    user: AdminUser
    initial_password: str = Field(..., description="Shown once; share it with the user")


class UserUpdateResponse(BaseModel):
    """Response of user updates."""
    user: AdminUser | None = None
    agencies: list[Agency] | None = None


# =============================================================================
# Caller Identity
# =============================================================================

class CurrentUser(BaseModel):
    """
    The authenticated caller with their profile.

    role is None when the user has no profile (or an unknown role);
    such users can order but see only their own orders.
    """

    id: UUID
    email: str | None = None
    role: Role | None = None
    agency_id: str | None = None

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
