# =============================================================================
# core/services/order_service.py - Order Business Logic
# =============================================================================
# Handles order intake, listing and admin edits.
# Separates HTTP concerns from database/business logic.
#
# Intake flow (create_order):
#   validate -> agency snapshot -> order number -> pricing -> insert (pending)
#   -> notification email -> mark sent
# =============================================================================

import logging
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID

from app.exceptions import (
    EmailDeliveryError,
    InvalidOrderStatusError,
    OrderNotFoundError,
    OrderNumberingError,
)
from core.models.order import (
    Order,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDeleteResponse,
    OrderList,
    OrderStatus,
    OrderUpdateRequest,
    OrderUpdateResponse,
)
from core.models.product import SHEET_PRICES, find_product
from core.models.user import CurrentUser
from core.services import calendar, pricing
from core.services.notification_service import compose_order_email, send_order_email
from core.services.validation import validate_new_order
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import clean_text, normalize_uuid
from app.config import settings

logger = logging.getLogger(__name__)

UNNAMED_PRODUCT = "(unnamed product)"


class OrderService:
    """
    Service for order operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Agency snapshot
    # -------------------------------------------------------------------------

    @staticmethod
    def _agency_lookups(
        rows: list[dict[str, Any]],
    ) -> tuple[dict[str, str], dict[str, str]]:
        """
        Build lookup tables to fill in missing agency data on order rows.

        Rows without agency id/name are matched through the creator's
        profile. Lookup failures are logged and leave the rows as they are.

        Returns:
            (agency_name_by_id, agency_id_by_email)
        """
        agency_name_by_id: dict[str, str] = {}
        agency_id_by_email: dict[str, str] = {}

        emails = sorted({
            row["created_by_email"]
            for row in rows
            if not row.get("agency_id") and not row.get("agency_name") and row.get("created_by_email")
        })
        agency_ids = {row["agency_id"] for row in rows if row.get("agency_id")}

        if emails:
            try:
                for profile in SupabaseClient.fetch_profiles_by_emails(emails):
                    if profile.get("email") and profile.get("agency_id"):
                        agency_id_by_email[profile["email"]] = profile["agency_id"]
                        agency_ids.add(profile["agency_id"])
            except SupabaseClientError as e:
                logger.error(f"Profile lookup for order agencies failed: {e}")

        if agency_ids:
            try:
                for agency in SupabaseClient.fetch_agencies(sorted(agency_ids)):
                    if agency.get("id") and agency.get("name"):
                        agency_name_by_id[agency["id"]] = agency["name"]
            except SupabaseClientError as e:
                logger.error(f"Agency lookup for orders failed: {e}")

        return agency_name_by_id, agency_id_by_email

    @staticmethod
    def _resolve_agency_snapshot(
        created_by_email: str | None,
        agency_id: str | None,
        agency_name: str | None,
    ) -> tuple[str | None, str | None]:
        """
        Fill agency id/name for a new order from the creator's profile.

        Only used when the submission carries neither; lookup failures
        keep the submitted values.
        """
        if agency_id or agency_name or not created_by_email:
            return agency_id, agency_name

        try:
            profile = SupabaseClient.fetch_profile_by_email(created_by_email)
            if not profile or not profile.get("agency_id"):
                return agency_id, agency_name

            agency = SupabaseClient.fetch_agency(profile["agency_id"])
        except SupabaseClientError as e:
            logger.error(f"Agency snapshot lookup failed for {created_by_email}: {e}")
            return agency_id, agency_name

        return profile["agency_id"], (agency or {}).get("name") or agency_name

    @staticmethod
    def _to_order(
        row: dict[str, Any],
        agency_name_by_id: dict[str, str],
        agency_id_by_email: dict[str, str],
    ) -> Order:
        """Row -> Order with the agency snapshot and price fallbacks applied."""
        email = row.get("created_by_email")
        agency_id = row.get("agency_id") or (agency_id_by_email.get(email) if email else None)
        agency_name = row.get("agency_name") or (agency_name_by_id.get(agency_id) if agency_id else None)

        unit_price = row.get("unit_price")
        if unit_price is None:
            unit_price = SHEET_PRICES.get(row.get("pieces_per_sheet"))
        tax_rate = row.get("tax_rate")
        if tax_rate is None:
            tax_rate = settings.DEFAULT_TAX_RATE

        return Order.from_row(
            row,
            agency_id=agency_id,
            agency_name=agency_name,
            unit_price=unit_price,
            tax_rate=tax_rate,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def is_visible_to(order: Order, viewer: CurrentUser) -> bool:
        """
        Admins see every order; others see their agency's orders and the
        orders they created.
        """
        if viewer.is_admin:
            return True
        if viewer.agency_id and order.agency_id == viewer.agency_id:
            return True
        return bool(viewer.email) and order.created_by_email == viewer.email

    @staticmethod
    def list_orders(
        viewer: CurrentUser,
        agency_name: str | None = None,
        month: str | None = None,
    ) -> OrderList:
        """
        List orders visible to the viewer, newest first.

        Args:
            viewer: The authenticated caller
            agency_name: Exact agency name filter
            month: YYYY-MM filter on delivery date (or creation date)

        Returns:
            OrderList with the orders and the agency names they cover
        """
        rows = SupabaseClient.fetch_orders()
        name_by_id, id_by_email = OrderService._agency_lookups(rows)

        orders = [
            order
            for order in (OrderService._to_order(row, name_by_id, id_by_email) for row in rows)
            if OrderService.is_visible_to(order, viewer)
        ]

        agency_names = sorted({o.agency_name for o in orders if o.agency_name})

        if agency_name:
            orders = [o for o in orders if o.agency_name == agency_name]
        if month:
            orders = [o for o in orders if o.billing_month == month]

        logger.debug(f"Listing {len(orders)} orders for user {viewer.id}")
        return OrderList(orders=orders, agency_names=agency_names)

    @staticmethod
    def get_order(order_id: str | UUID) -> Order:
        """
        Get a single order.

        Raises:
            OrderNotFoundError: If the order doesn't exist
        """
        row = SupabaseClient.fetch_order(order_id)
        if not row:
            raise OrderNotFoundError(normalize_uuid(order_id))
        name_by_id, id_by_email = OrderService._agency_lookups([row])
        return OrderService._to_order(row, name_by_id, id_by_email)

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    @staticmethod
    def next_order_number(now: datetime) -> str:
        """
        Issue ORD-YYYYMMDD-NNNN for the business day containing now.

        NNNN is one more than the number of orders created that day.

        Raises:
            OrderNumberingError: If the day's orders can't be counted
        """
        start, end = calendar.day_bounds(now)
        try:
            count = SupabaseClient.count_orders_created_between(
                start.isoformat(), end.isoformat()
            )
        except SupabaseClientError as e:
            logger.error(f"Order count for numbering failed: {e}")
            raise OrderNumberingError(str(e))

        return f"ORD-{now:%Y%m%d}-{count + 1:04d}"

    @staticmethod
    def create_order(
        request: OrderCreateRequest,
        user: CurrentUser | None = None,
    ) -> OrderCreateResponse:
        """
        Validate, price, save and announce a new order.

        Args:
            request: Order form submission
            user: The submitting user (supplies created_by_email by default)

        Returns:
            OrderCreateResponse; email_sent is False when mail is not
            configured and the order stays pending

        Raises:
            OrderValidationError: If a business rule fails
            OrderNumberingError: If no order number could be issued
            EmailDeliveryError: If the email failed (the order is saved)
        """
        now = calendar.business_now()
        product_id = clean_text(request.product_id)
        product = find_product(product_id)

        validate_new_order(request, product, now.date())

        product_name = (
            clean_text(request.product_name)
            or (product.name if product else "")
            or UNNAMED_PRODUCT
        )
        created_by_email = request.created_by_email or (user.email if user else None)
        agency_id, agency_name = OrderService._resolve_agency_snapshot(
            created_by_email,
            request.agency_id,
            request.agency_name,
        )

        order_number = OrderService.next_order_number(now)

        unit_price = pricing.resolve_unit_price(request.unit_price, request.pieces_per_sheet, product)
        tax_rate = pricing.resolve_tax_rate(request.tax_rate, request.pieces_per_sheet, product)
        totals = pricing.calculate_totals(unit_price, request.quantity, tax_rate)

        row = SupabaseClient.insert_order({
            "order_number": order_number,
            "product_id": product_id,
            "product_name": product_name,
            "pieces_per_sheet": request.pieces_per_sheet,
            "quantity": request.quantity,
            "postal_and_address": clean_text(request.postal_and_address),
            "recipient_name": clean_text(request.recipient_name),
            "phone_number": clean_text(request.phone_number),
            "delivery_date": clean_text(request.delivery_date),
            "delivery_time_note": request.delivery_time_note,
            "agency_id": agency_id,
            "agency_name": agency_name,
            "created_by_email": created_by_email,
            "status": OrderStatus.PENDING.value,
            "unit_price": unit_price,
            "tax_rate": tax_rate,
            **totals.as_row(),
        })
        saved = Order.from_row(row)
        logger.info(f"Saved order {saved.order_number} ({saved.id}) for {created_by_email or 'unknown user'}")

        order, email_sent = OrderService.notify(saved, now.date())
        return OrderCreateResponse(order=order, email_sent=email_sent)

    @staticmethod
    def notify(order: Order, ordered_on: date) -> tuple[Order, bool]:
        """
        Send the order email and mark the order sent.

        Returns:
            (order, email_sent); the order is unchanged when sending was skipped

        Raises:
            EmailDeliveryError: If the mail service raised
        """
        email = compose_order_email(order, ordered_on)
        logger.info(f"Sending order email for {order.order_number} (mode={settings.ORDER_MAIL_MODE})")

        try:
            message_id = send_order_email(email)
        except Exception as e:
            logger.error(f"Order email for {order.order_number} failed: {e}")
            raise EmailDeliveryError(order.id, order.order_number, str(e))

        if not message_id:
            logger.warning(f"Order email for {order.order_number} skipped; order stays pending")
            return order, False

        updated = SupabaseClient.update_order(order.id, {
            "status": OrderStatus.SENT.value,
            "email_sent_at": datetime.now(timezone.utc).isoformat(),
            "email_message_id": message_id,
        })
        logger.info(f"Order email for {order.order_number} sent (message id {message_id})")

        if not updated:
            return order.model_copy(update={"status": OrderStatus.SENT}), True
        return Order.from_row(updated), True

    @staticmethod
    def resend_notification(order_id: str | UUID) -> dict[str, Any]:
        """
        Re-send the email of an existing order (used by the worker).

        Returns:
            Dict with order_id, order_number, email_sent and status
        """
        order = OrderService.get_order(order_id)
        ordered_on = calendar.business_today()
        if order.created_at:
            try:
                created = datetime.fromisoformat(order.created_at)
                if created.tzinfo is not None:
                    created = created.astimezone(calendar.business_timezone())
                ordered_on = created.date()
            except ValueError:
                pass

        updated, email_sent = OrderService.notify(order, ordered_on)
        return {
            "order_id": updated.id,
            "order_number": updated.order_number,
            "email_sent": email_sent,
            "status": updated.status.value,
        }

    # -------------------------------------------------------------------------
    # Admin edits
    # -------------------------------------------------------------------------

    @staticmethod
    def update_order(
        order_id: str | UUID,
        request: OrderUpdateRequest,
    ) -> OrderUpdateResponse | OrderDeleteResponse:
        """
        Overwrite status and pricing of an order.

        A "canceled" status deletes the order. When unit_price or
        tax_rate is given, subtotal, tax and total are recomputed from
        the stored quantity.

        Raises:
            InvalidOrderStatusError: If status is missing or unknown
            OrderNotFoundError: If the order doesn't exist
        """
        order_id_str = normalize_uuid(order_id)

        if request.status is None or request.status not in OrderStatus.values():
            raise InvalidOrderStatusError(request.status, OrderStatus.values())
        status = OrderStatus(request.status)

        current = SupabaseClient.fetch_order(order_id_str)
        if not current:
            raise OrderNotFoundError(order_id_str)

        if status == OrderStatus.CANCELED:
            SupabaseClient.delete_order(order_id_str)
            logger.info(f"Canceled (deleted) order {current.get('order_number')} ({order_id_str})")
            return OrderDeleteResponse(deleted_id=order_id_str)

        update: dict[str, Any] = {"status": status.value}
        if request.unit_price is not None:
            update["unit_price"] = request.unit_price
        if request.tax_rate is not None:
            update["tax_rate"] = request.tax_rate

        if request.unit_price is not None or request.tax_rate is not None:
            unit_price = request.unit_price if request.unit_price is not None else current.get("unit_price")
            tax_rate = request.tax_rate if request.tax_rate is not None else current.get("tax_rate")
            totals = pricing.calculate_totals(unit_price, current.get("quantity"), tax_rate)
            update.update(totals.as_row())

        updated = SupabaseClient.update_order(order_id_str, update)
        if not updated:
            raise OrderNotFoundError(order_id_str)

        logger.info(f"Updated order {updated.get('order_number')} ({order_id_str}): {sorted(update)}")
        return OrderUpdateResponse(order=Order.from_row(updated))
