# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Orders (list, count per day, insert, update, delete)
# - Profiles and agencies (admin user management, agency lookups)
# - Supabase Auth admin API (create/delete/list users)
# - Backfill RPC functions
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   orders = SupabaseClient.fetch_orders()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

ORDER_COLUMNS = (
    "id, order_number, product_id, product_name, pieces_per_sheet, quantity, "
    "postal_and_address, recipient_name, phone_number, delivery_date, "
    "delivery_time_note, agency_id, agency_name, created_by_email, status, "
    "unit_price, tax_rate, subtotal, tax_amount, total_amount, created_at"
)

PROFILE_COLUMNS = "id, display_name, role, agency_id, email"

AGENCY_COLUMNS = "id, name, code"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code and a suggestion for fixing the problem.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        orders = SupabaseClient.fetch_orders()
        profile = SupabaseClient.fetch_profile(user_id)
        agency_name = profile and SupabaseClient.fetch_agency(profile["agency_id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @staticmethod
    def _first(response: Any) -> dict[str, Any] | None:
        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_orders(cls) -> list[dict[str, Any]]:
        """
        Fetch all orders, newest first.

        Returns:
            List of order rows (see ORDER_COLUMNS)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("orders")
                .select(ORDER_COLUMNS)
                .order("created_at", desc=True)
                .execute()
            )
            orders = response.data or []
            logger.debug(f"Fetched {len(orders)} orders")
            return orders

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch orders: {e}",
                code="FETCH_ORDERS_FAILED",
                suggestion="Check that the orders table is accessible",
            )

    @classmethod
    def fetch_order(cls, order_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single order by ID.

        Returns:
            Order row, or None if not found
        """
        client = cls.get_client()
        order_id_str = cls._normalize_uuid(order_id)

        try:
            response = (
                client.table("orders")
                .select(ORDER_COLUMNS)
                .eq("id", order_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch order: {e}",
                code="FETCH_ORDER_FAILED",
                details={"order_id": order_id_str}
            )

    @classmethod
    def count_orders_created_between(cls, start_iso: str, end_iso: str) -> int:
        """
        Count orders with start <= created_at < end.

        Used to issue sequential order numbers per business day.
        """
        client = cls.get_client()

        try:
            response = (
                client.table("orders")
                .select("id", count="exact")
                .gte("created_at", start_iso)
                .lt("created_at", end_iso)
                .execute()
            )
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count orders: {e}",
                code="COUNT_ORDERS_FAILED",
                details={"start": start_iso, "end": end_iso}
            )

    @classmethod
    def insert_order(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new order row.

        Returns:
            Inserted order with generated id and created_at

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table("orders").insert(data).execute()

            row = cls._first(response)
            if row:
                return row
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to save order: {e}",
                code="INSERT_ORDER_FAILED",
                details={"order_number": data.get("order_number")}
            )

    @classmethod
    def update_order(cls, order_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Overwrite fields of an order.

        Returns:
            Updated order row, or None if no row matched
        """
        client = cls.get_client()
        order_id_str = cls._normalize_uuid(order_id)

        try:
            response = (
                client.table("orders")
                .update(data)
                .eq("id", order_id_str)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update order: {e}",
                code="UPDATE_ORDER_FAILED",
                details={"order_id": order_id_str, "fields": sorted(data)}
            )

    @classmethod
    def delete_order(cls, order_id: str | UUID) -> None:
        """Delete an order row."""
        client = cls.get_client()
        order_id_str = cls._normalize_uuid(order_id)

        try:
            client.table("orders").delete().eq("id", order_id_str).execute()
            logger.info(f"Deleted order {order_id_str}")

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete order: {e}",
                code="DELETE_ORDER_FAILED",
                details={"order_id": order_id_str}
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profiles(cls) -> list[dict[str, Any]]:
        """Fetch every profile row."""
        client = cls.get_client()

        try:
            response = client.table("profiles").select(PROFILE_COLUMNS).execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profiles: {e}",
                code="FETCH_PROFILES_FAILED",
            )

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a profile by user ID.

        Returns:
            Profile row, or None if not found
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("id", user_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_profile_by_email(cls, email: str) -> dict[str, Any] | None:
        """Fetch the first profile registered with an email address."""
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select(PROFILE_COLUMNS)
                .eq("email", email)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile by email: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"email": email}
            )

    @classmethod
    def fetch_profiles_by_emails(cls, emails: list[str]) -> list[dict[str, Any]]:
        """Fetch profiles whose email is in the given list."""
        if not emails:
            return []
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select("id, email, agency_id")
                .in_("email", emails)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profiles by email: {e}",
                code="FETCH_PROFILES_FAILED",
                details={"email_count": len(emails)}
            )

    @classmethod
    def fetch_profiles_by_ids(cls, user_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch id and email of the profiles with the given IDs."""
        if not user_ids:
            return []
        client = cls.get_client()

        try:
            response = (
                client.table("profiles")
                .select("id, email")
                .in_("id", user_ids)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profiles by id: {e}",
                code="FETCH_PROFILES_FAILED",
                details={"id_count": len(user_ids)}
            )

    @classmethod
    def insert_profile(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a profile row."""
        client = cls.get_client()

        try:
            response = client.table("profiles").insert(data).execute()
            return cls._first(response) or data

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create profile: {e}",
                code="INSERT_PROFILE_FAILED",
                details={"user_id": data.get("id")}
            )

    @classmethod
    def update_profile(cls, user_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """Overwrite fields of a profile; returns the updated row."""
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .update(data)
                .eq("id", user_id_str)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPDATE_PROFILE_FAILED",
                details={"user_id": user_id_str, "fields": sorted(data)}
            )

    @classmethod
    def upsert_profiles(cls, rows: list[dict[str, Any]]) -> None:
        """Insert or update profile rows keyed by id."""
        client = cls.get_client()

        try:
            client.table("profiles").upsert(rows).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upsert profiles: {e}",
                code="UPSERT_PROFILES_FAILED",
                details={"row_count": len(rows)}
            )

    @classmethod
    def delete_profile(cls, user_id: str | UUID) -> None:
        """Delete a profile row."""
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            client.table("profiles").delete().eq("id", user_id_str).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete profile: {e}",
                code="DELETE_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Agencies
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_agencies(cls, agency_ids: list[str] | None = None) -> list[dict[str, Any]]:
        """
        Fetch agencies, optionally restricted to a set of IDs.

        Returns:
            List of agency rows with id, name, code
        """
        if agency_ids is not None and not agency_ids:
            return []
        client = cls.get_client()

        try:
            query = client.table("agencies").select(AGENCY_COLUMNS)
            if agency_ids is not None:
                query = query.in_("id", agency_ids)
            response = query.execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch agencies: {e}",
                code="FETCH_AGENCIES_FAILED",
            )

    @classmethod
    def fetch_agency(cls, agency_id: str | UUID) -> dict[str, Any] | None:
        """Fetch an agency by ID, or None if it doesn't exist."""
        client = cls.get_client()
        agency_id_str = cls._normalize_uuid(agency_id)

        try:
            response = (
                client.table("agencies")
                .select(AGENCY_COLUMNS)
                .eq("id", agency_id_str)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch agency: {e}",
                code="FETCH_AGENCY_FAILED",
                details={"agency_id": agency_id_str}
            )

    @classmethod
    def fetch_agency_by_name(cls, name: str) -> dict[str, Any] | None:
        """Fetch an agency by its exact name."""
        client = cls.get_client()

        try:
            response = (
                client.table("agencies")
                .select(AGENCY_COLUMNS)
                .eq("name", name)
                .limit(1)
                .execute()
            )
            return cls._first(response)

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch agency: {e}",
                code="FETCH_AGENCY_FAILED",
                details={"name": name}
            )

    @classmethod
    def insert_agency(cls, name: str, code: str) -> dict[str, Any]:
        """Create an agency and return the new row."""
        client = cls.get_client()

        try:
            response = (
                client.table("agencies")
                .insert({"name": name, "code": code})
                .execute()
            )
            row = cls._first(response)
            if row:
                logger.info(f"Created agency {row.get('id')} ({name})")
                return row
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create agency: {e}",
                code="INSERT_AGENCY_FAILED",
                details={"name": name}
            )

    # -------------------------------------------------------------------------
    # Auth Admin API
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_auth_email(cls, user_id: str | UUID) -> str | None:
        """
        Look up a user's email in Supabase Auth.

        Returns None when the lookup fails; callers fall back to the
        profile email.
        """
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            response = client.auth.admin.get_user_by_id(user_id_str)
            user = getattr(response, "user", None)
            return getattr(user, "email", None)
        except Exception as e:
            logger.error(f"Auth lookup failed for {user_id_str}: {e}")
            return None

    @classmethod
    def create_auth_user(cls, email: str, password: str) -> str:
        """
        Create a confirmed Supabase Auth user.

        Returns:
            The new user's ID
        """
        client = cls.get_client()

        try:
            response = client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
            })
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create auth user: {e}",
                code="CREATE_AUTH_USER_FAILED",
                suggestion="Check that the email address isn't already registered",
                details={"email": email}
            )

        user = getattr(response, "user", None)
        if user is None:
            raise SupabaseClientError(
                message="Auth API returned no user",
                code="CREATE_AUTH_USER_FAILED",
                details={"email": email}
            )
        return str(user.id)

    @classmethod
    def delete_auth_user(cls, user_id: str | UUID) -> None:
        """Delete a Supabase Auth user."""
        client = cls.get_client()
        user_id_str = cls._normalize_uuid(user_id)

        try:
            client.auth.admin.delete_user(user_id_str)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete auth user: {e}",
                code="DELETE_AUTH_USER_FAILED",
                details={"user_id": user_id_str}
            )

    @classmethod
    def list_auth_users(cls, page: int, per_page: int) -> list[dict[str, Any]]:
        """
        List one page of Supabase Auth users.

        Returns:
            List of {"id", "email"} dicts
        """
        client = cls.get_client()

        try:
            users = client.auth.admin.list_users(page=page, per_page=per_page)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list auth users: {e}",
                code="LIST_AUTH_USERS_FAILED",
                details={"page": page}
            )

        return [
            {"id": str(user.id), "email": getattr(user, "email", None) or None}
            for user in users or []
        ]

    # -------------------------------------------------------------------------
    # RPC
    # -------------------------------------------------------------------------

    @classmethod
    def call_rpc(cls, function_name: str, params: dict[str, Any] | None = None) -> Any:
        """Call a Postgres function and return its result data."""
        client = cls.get_client()

        try:
            response = client.rpc(function_name, params or {}).execute()
            return response.data

        except Exception as e:
            raise SupabaseClientError(
                message=f"RPC {function_name} failed: {e}",
                code="RPC_FAILED",
                details={"function": function_name}
            )
