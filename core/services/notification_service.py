# =============================================================================
# core/services/notification_service.py - Order Notification Emails
# =============================================================================
# Composes the plain-text "order received" email sent to the supplier and
# dispatches it according to ORDER_MAIL_MODE:
# - mock: log the email, report message id "mock"
# - ses:  send through AWS SES (lib.ses_client)
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import date

from app.config import settings
from core.models.order import Order
from lib.ses_client import SESMailer

logger = logging.getLogger(__name__)

MOCK_MESSAGE_ID = "mock"
AGENCY_NOT_SET = "agency not set"


@dataclass(frozen=True)
class OrderEmail:
    subject: str
    body: str


def _or_dash(value: object) -> str:
    return "-" if value is None or value == "" else str(value)


def compose_order_email(order: Order, ordered_on: date) -> OrderEmail:
    """
    Build the notification for a saved order.

    Args:
        order: The saved order
        ordered_on: Business date the order was placed

    Returns:
        OrderEmail with subject and body
    """
    agency_label = (order.agency_name or "").strip() or AGENCY_NOT_SET
    subject = f"Strawberry order received ({agency_label} / {ordered_on.isoformat()})"

    pieces = f"{order.pieces_per_sheet} pieces" if order.pieces_per_sheet is not None else "-"
    lines = [
        "A new strawberry order has been registered.",
        "",
        f"Order number: {order.order_number}",
        "",
        "[Product]",
        f"Product: {_or_dash(order.product_name)}",
        f"Pieces per sheet: {pieces}",
        f"Sheets: {order.quantity}",
        "",
        "[Delivery address]",
        f"Postal code / address: {order.postal_and_address}",
        f"Recipient: {order.recipient_name}",
        f"Phone: {order.phone_number}",
        "",
        "[Requested arrival]",
        f"Arrival date: {_or_dash(order.delivery_date)}",
        f"Time / note: {_or_dash(order.delivery_time_note)}",
        "",
        "[Ordered by]",
        f"Agency: {_or_dash(order.agency_name)}",
        f"Email: {_or_dash(order.created_by_email)}",
    ]
    return OrderEmail(subject=subject, body="\n".join(lines))


def send_order_email(email: OrderEmail) -> str | None:
    """
    Dispatch an order email.

    Returns:
        Message id, or None when sending was skipped (mail not configured)

    Raises:
        Exception: Whatever the SES client raised
    """
    if settings.ORDER_MAIL_MODE == "ses":
        return SESMailer.send_text_email(email.subject, email.body)

    logger.info(f"[mock email] {email.subject}\n{email.body}")
    return MOCK_MESSAGE_ID
