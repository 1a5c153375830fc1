# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response tells the caller what failed and how to fix it.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class OrderDeskException(Exception):
    """
    Base exception for the OrderDesk API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ORDERDESK_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Order Exceptions
# =============================================================================

class OrderNotFoundError(OrderDeskException):
    """Raised when an order ID doesn't exist."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
            status_code=404,
            suggestion="Reload the order list; the order may have been canceled",
            details={"order_id": order_id}
        )


class OrderValidationError(OrderDeskException):
    """Raised when a submitted order breaks a business rule."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="ORDER_INVALID",
            status_code=400,
            details={"field": field} if field else None,
        )
        self.field = field


class InvalidOrderStatusError(OrderDeskException):
    """Raised when a status update is missing or not an allowed value."""

    def __init__(self, status: str | None, allowed: list[str]):
        super().__init__(
            message="Status is required" if status is None else f"Invalid status: {status}",
            code="INVALID_STATUS",
            status_code=400,
            suggestion=f"Use one of: {', '.join(allowed)}",
            details={"status": status, "allowed": allowed}
        )


class OrderNumberingError(OrderDeskException):
    """Raised when today's order count can't be read to issue an order number."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to issue an order number",
            code="ORDER_NUMBERING_FAILED",
            status_code=500,
            suggestion="Try submitting the order again",
            details={"error": error}
        )


class EmailDeliveryError(OrderDeskException):
    """Raised when the order email could not be sent."""

    def __init__(self, order_id: str, order_number: str, error: str):
        super().__init__(
            message="Order was saved but the notification email failed",
            code="EMAIL_DELIVERY_FAILED",
            status_code=500,
            suggestion="Do not resubmit the order; an administrator can resend the email",
            details={"order_id": order_id, "order_number": order_number, "error": error}
        )


# =============================================================================
# User / Agency Exceptions
# =============================================================================

class UserNotFoundError(OrderDeskException):
    """Raised when a profile ID doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the user ID is correct",
            details={"user_id": user_id}
        )


class AgencyNotFoundError(OrderDeskException):
    """Raised when a referenced agency doesn't exist."""

    def __init__(self, agency_id: str):
        super().__init__(
            message=f"Agency not found: {agency_id}",
            code="AGENCY_NOT_FOUND",
            status_code=400,
            suggestion="Pick an existing agency or create one with new_agency_name",
            details={"agency_id": agency_id}
        )


class InvalidRoleError(OrderDeskException):
    """Raised when a role is missing or unknown, or an agency user has no agency."""

    def __init__(self, message: str, role: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_ROLE",
            status_code=400,
            suggestion="Roles are 'admin' or 'agency'; agency users need an agency_id",
            details={"role": role} if role else None,
        )


class NoUpdatesError(OrderDeskException):
    """Raised when an update request carries no fields."""

    def __init__(self):
        super().__init__(
            message="No fields to update",
            code="NO_UPDATES",
            status_code=400,
            suggestion="Send at least one of display_name, role or agency_id",
        )


class AdminRequiredError(OrderDeskException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self):
        super().__init__(
            message="Administrator privileges are required",
            code="ADMIN_REQUIRED",
            status_code=403,
            suggestion="Sign in with an administrator account",
        )


class BackfillError(OrderDeskException):
    """Raised when a database backfill step fails."""

    def __init__(self, step: str, error: str):
        super().__init__(
            message=f"Backfill failed at step: {step}",
            code="BACKFILL_FAILED",
            status_code=500,
            suggestion="Check that supabase/schema.sql has been applied",
            details={"step": step, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def orderdesk_exception_handler(
    request: Request,
    exc: OrderDeskException
) -> JSONResponse:
    """
    Convert OrderDeskException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """Convert database wrapper errors to a 500 JSON response."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    content = {
        "detail": exc.message,
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=500, content=content)


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = exc.errors() if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors if isinstance(errors, str) else [
                {"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in errors
            ],
        }
    )
