# =============================================================================
# core/models/order.py - Order Schemas
# =============================================================================
# These models define the API contract for order operations:
# - OrderStatus: Enum for the order lifecycle
# - Order: An order as returned to clients
# - OrderCreateRequest: Order form submission
# - OrderUpdateRequest: Admin edits (status, pricing)
#
# Request models accept both camelCase (order form) and snake_case keys.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrderStatus(str, Enum):
    """
    Possible states for an order.

    - pending: Saved, notification email not (yet) sent
    - sent: Notification email delivered to the supplier
    - canceled: Withdrawn by an administrator (the row is deleted)

    Flow: pending -> sent -> canceled
    """
    PENDING = "pending"
    SENT = "sent"
    CANCELED = "canceled"

    @classmethod
    def from_raw(cls, value: str | None) -> "OrderStatus":
        """
        Normalize a stored status.

        Older rows use "shipped" for sent; unknown or empty values
        read as pending.
        """
        if value == "shipped":
            return cls.SENT
        try:
            return cls(value)
        except ValueError:
            return cls.PENDING

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


class Order(BaseModel):
    """
    An order as shown in the order tables.

    Amounts are whole yen; tax_rate is a percentage.
    """

    id: str
    order_number: str
    product_id: str | None = None
    product_name: str = ""
    pieces_per_sheet: int | None = None
    quantity: int = 0
    postal_and_address: str = ""
    recipient_name: str = ""
    phone_number: str = ""
    delivery_date: str | None = None
    delivery_time_note: str | None = None
    agency_id: str | None = None
    agency_name: str | None = None
    created_by_email: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: str | None = None
    unit_price: int | None = None
    tax_rate: int | None = None
    subtotal: int | None = None
    tax_amount: int | None = None
    total_amount: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any], **overrides: Any) -> "Order":
        """
        Build an Order from a database row.

        NULL text columns become empty strings and the status is
        normalized. Keyword overrides replace row values (resolved
        agency snapshot, price fallbacks).
        """
        data = {
            "id": str(row["id"]),
            "order_number": row.get("order_number") or "",
            "product_id": row.get("product_id"),
            "product_name": row.get("product_name") or "",
            "pieces_per_sheet": row.get("pieces_per_sheet"),
            "quantity": row.get("quantity") or 0,
            "postal_and_address": row.get("postal_and_address") or "",
            "recipient_name": row.get("recipient_name") or "",
            "phone_number": row.get("phone_number") or "",
            "delivery_date": row.get("delivery_date"),
            "delivery_time_note": row.get("delivery_time_note"),
            "agency_id": row.get("agency_id"),
            "agency_name": row.get("agency_name"),
            "created_by_email": row.get("created_by_email"),
            "status": OrderStatus.from_raw(row.get("status")),
            "created_at": row.get("created_at"),
            "unit_price": row.get("unit_price"),
            "tax_rate": row.get("tax_rate"),
            "subtotal": row.get("subtotal"),
            "tax_amount": row.get("tax_amount"),
            "total_amount": row.get("total_amount"),
        }
        data.update(overrides)
        return cls(**data)

    @property
    def billing_month(self) -> str:
        """YYYY-MM of the delivery date, or of the creation time when unset."""
        return str(self.delivery_date or self.created_at or "")[:7]


# =============================================================================
# Requests
# =============================================================================

class OrderCreateRequest(BaseModel):
    """
    Order form submission.

    Business rules (even quantity, winter multiples, lead time) are
    checked by core.services.validation so that each failure gets its
    own message; only types are enforced here.

    Example:
        {
            "productId": "p1",
            "quantity": 4,
            "piecesPerSheet": 36,
            "postalAndAddress": "100-0001 Chiyoda 1-1, Tokyo",
            "recipientName": "Hanako Yamada",
            "phoneNumber": "03-0000-0000",
            "deliveryDate": "2025-03-10",
            "deliveryTimeNote": "Morning"
        }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str | None = None
    product_name: str | None = None
    quantity: int | None = None
    pieces_per_sheet: int | None = None
    postal_and_address: str | None = None
    recipient_name: str | None = None
    phone_number: str | None = None
    delivery_date: str | None = None
    delivery_time_note: str | None = None
    created_by_email: str | None = None
    agency_id: str | None = None
    agency_name: str | None = None

    # Optional explicit pricing; otherwise derived from the price tables
    unit_price: int | None = Field(default=None, ge=0)
    tax_rate: int | None = Field(default=None, ge=0, le=100)


class OrderUpdateRequest(BaseModel):
    """
    Admin edit of an order row.

    status is required; "canceled" deletes the order. unit_price and
    tax_rate, when given, trigger recalculation of the totals.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str | None = None
    unit_price: int | None = Field(default=None, ge=0)
    tax_rate: int | None = Field(default=None, ge=0, le=100)


# =============================================================================
# Responses
# =============================================================================

class OrderCreateResponse(BaseModel):
    """Response of POST /orders."""
    ok: bool = True
    order: Order
    email_sent: bool


class OrderUpdateResponse(BaseModel):
    """Response of PATCH /orders/{id} for non-cancel updates."""
    ok: bool = True
    order: Order


class OrderDeleteResponse(BaseModel):
    """Response of PATCH /orders/{id} with status=canceled."""
    ok: bool = True
    deleted_id: str


class OrderList(BaseModel):
    """Response of GET /orders."""
    orders: list[Order] = Field(default_factory=list)
    agency_names: list[str] = Field(
        default_factory=list,
        description="Distinct agency names of the visible orders (filter options)"
    )
