# =============================================================================
# tests/test_order_service.py - Order Service Tests
# =============================================================================
# OrderService against a mocked SupabaseClient:
# - Intake: numbering, pricing, agency snapshot, email outcomes
# - Listing: visibility, agency/month filters, read fallbacks
# - Admin edits: status overwrite, cancel-deletes, total recalculation
#
# Run with: pytest tests/test_order_service.py -v
# =============================================================================

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from app.exceptions import (
    EmailDeliveryError,
    InvalidOrderStatusError,
    OrderNotFoundError,
    OrderNumberingError,
    OrderValidationError,
)
from core.models.order import (
    OrderCreateRequest,
    OrderDeleteResponse,
    OrderStatus,
    OrderUpdateRequest,
)
from core.models.user import CurrentUser
from core.services import calendar
from core.services.order_service import OrderService
from lib.supabase_client import SupabaseClientError
from tests.conftest import AGENCY_ID, ORDER_ID, OTHER_AGENCY_ID

NOW = datetime(2025, 3, 1, 9, 30, tzinfo=ZoneInfo("Asia/Tokyo"))


@pytest.fixture
def mock_supabase():
    """Mocked SupabaseClient with empty lookups by default."""
    with patch("core.services.order_service.SupabaseClient") as mock:
        mock.fetch_orders.return_value = []
        mock.fetch_order.return_value = None
        mock.fetch_profile_by_email.return_value = None
        mock.fetch_profiles_by_emails.return_value = []
        mock.fetch_agencies.return_value = []
        mock.fetch_agency.return_value = None
        mock.count_orders_created_between.return_value = 0
        mock.insert_order.side_effect = lambda data: {
            "id": ORDER_ID,
            "created_at": "2025-03-01T00:30:00+00:00",
            **data,
        }
        mock.update_order.side_effect = lambda order_id, data: {
            **mock.insert_order.call_args.args[0],
            "id": order_id,
            **data,
        }
        yield mock


@pytest.fixture
def fixed_now():
    with patch.object(calendar, "business_now", return_value=NOW):
        yield NOW


@pytest.fixture
def send_email():
    with patch("core.services.order_service.send_order_email") as mock:
        mock.return_value = "mock"
        yield mock


# =============================================================================
# Order Numbering
# =============================================================================

class TestOrderNumber:

    def test_first_order_of_the_day(self, mock_supabase):
        assert OrderService.next_order_number(NOW) == "ORD-20250301-0001"

    def test_counts_orders_of_the_business_day(self, mock_supabase):
        mock_supabase.count_orders_created_between.return_value = 41

        assert OrderService.next_order_number(NOW) == "ORD-20250301-0042"
        mock_supabase.count_orders_created_between.assert_called_once_with(
            "2025-03-01T00:00:00+09:00",
            "2025-03-02T00:00:00+09:00",
        )

    def test_count_failure(self, mock_supabase):
        mock_supabase.count_orders_created_between.side_effect = SupabaseClientError("boom")

        with pytest.raises(OrderNumberingError):
            OrderService.next_order_number(NOW)


# =============================================================================
# Intake
# =============================================================================

class TestCreateOrder:

    def test_saves_pending_then_marks_sent(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        response = OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        inserted = mock_supabase.insert_order.call_args.args[0]
        assert inserted["status"] == "pending"
        assert inserted["order_number"] == "ORD-20250301-0001"
        assert inserted["product_name"] == "Summer strawberries"
        assert inserted["unit_price"] == 1296
        assert inserted["tax_rate"] == 10
        assert inserted["subtotal"] == 5184
        assert inserted["tax_amount"] == 518
        assert inserted["total_amount"] == 5702

        update = mock_supabase.update_order.call_args.args[1]
        assert update["status"] == "sent"
        assert update["email_message_id"] == "mock"
        assert "email_sent_at" in update

        assert response.ok is True
        assert response.email_sent is True
        assert response.order.status == OrderStatus.SENT

    def test_created_by_defaults_to_caller(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        inserted = mock_supabase.insert_order.call_args.args[0]
        assert inserted["created_by_email"] == agency_user.email

    def test_agency_snapshot_from_creator_profile(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        mock_supabase.fetch_profile_by_email.return_value = {"id": "x", "agency_id": AGENCY_ID}
        mock_supabase.fetch_agency.return_value = {"id": AGENCY_ID, "name": "Tokyo Fresh"}

        OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        inserted = mock_supabase.insert_order.call_args.args[0]
        assert inserted["agency_id"] == AGENCY_ID
        assert inserted["agency_name"] == "Tokyo Fresh"

    def test_submitted_agency_is_kept(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        order_form["agencyName"] = "Walk-in"

        OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        mock_supabase.fetch_profile_by_email.assert_not_called()
        assert mock_supabase.insert_order.call_args.args[0]["agency_name"] == "Walk-in"

    def test_agency_lookup_failure_is_not_fatal(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        mock_supabase.fetch_profile_by_email.side_effect = SupabaseClientError("down")

        response = OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        assert response.ok is True
        assert mock_supabase.insert_order.call_args.args[0]["agency_id"] is None

    def test_email_skipped_keeps_order_pending(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        send_email.return_value = None

        response = OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        mock_supabase.update_order.assert_not_called()
        assert response.email_sent is False
        assert response.order.status == OrderStatus.PENDING

    def test_email_failure_raises_after_saving(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        send_email.side_effect = RuntimeError("SES down")

        with pytest.raises(EmailDeliveryError):
            OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        mock_supabase.insert_order.assert_called_once()
        mock_supabase.update_order.assert_not_called()

    def test_invalid_order_is_not_saved(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        order_form["quantity"] = 3

        with pytest.raises(OrderValidationError):
            OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        mock_supabase.count_orders_created_between.assert_not_called()
        mock_supabase.insert_order.assert_not_called()

    def test_numbering_failure_is_not_saved(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        mock_supabase.count_orders_created_between.side_effect = SupabaseClientError("boom")

        with pytest.raises(OrderNumberingError):
            OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        mock_supabase.insert_order.assert_not_called()

    def test_explicit_pricing(self, mock_supabase, fixed_now, send_email, order_form, agency_user):
        order_form.update(unitPrice=1000, taxRate=8)

        OrderService.create_order(OrderCreateRequest(**order_form), agency_user)

        inserted = mock_supabase.insert_order.call_args.args[0]
        assert inserted["subtotal"] == 4000
        assert inserted["tax_amount"] == 320
        assert inserted["total_amount"] == 4320


# =============================================================================
# Listing
# =============================================================================

class TestListOrders:

    @pytest.fixture
    def rows(self, order_row):
        other_agency = {
            **order_row,
            "id": "bbbbbbbb-0000-0000-0000-000000000002",
            "agency_id": OTHER_AGENCY_ID,
            "agency_name": "Osaka Berries",
            "created_by_email": "osaka@example.com",
            "delivery_date": "2025-04-02",
        }
        own_without_agency = {
            **order_row,
            "id": "bbbbbbbb-0000-0000-0000-000000000003",
            "agency_id": None,
            "agency_name": None,
            "created_by_email": "solo@example.com",
        }
        return [order_row, other_agency, own_without_agency]

    def test_admin_sees_everything(self, mock_supabase, rows, admin_user):
        mock_supabase.fetch_orders.return_value = rows

        result = OrderService.list_orders(admin_user)

        assert len(result.orders) == 3
        assert result.agency_names == ["Osaka Berries", "Tokyo Fresh"]

    def test_agency_user_sees_own_agency(self, mock_supabase, rows, agency_user):
        mock_supabase.fetch_orders.return_value = rows

        result = OrderService.list_orders(agency_user)

        assert [o.agency_name for o in result.orders] == ["Tokyo Fresh"]

    def test_user_without_agency_sees_own_orders(self, mock_supabase, rows):
        mock_supabase.fetch_orders.return_value = rows
        viewer = CurrentUser(id="55555555-5555-5555-5555-555555555555", email="solo@example.com")

        result = OrderService.list_orders(viewer)

        assert [o.created_by_email for o in result.orders] == ["solo@example.com"]

    def test_agency_name_filter(self, mock_supabase, rows, admin_user):
        mock_supabase.fetch_orders.return_value = rows

        result = OrderService.list_orders(admin_user, agency_name="Osaka Berries")

        assert len(result.orders) == 1
        assert result.agency_names == ["Osaka Berries", "Tokyo Fresh"]

    def test_month_filter(self, mock_supabase, rows, admin_user):
        mock_supabase.fetch_orders.return_value = rows

        result = OrderService.list_orders(admin_user, month="2025-04")

        assert [o.delivery_date for o in result.orders] == ["2025-04-02"]

    def test_agency_resolved_through_creator_profile(self, mock_supabase, rows, admin_user):
        mock_supabase.fetch_orders.return_value = rows
        mock_supabase.fetch_profiles_by_emails.return_value = [
            {"id": "p", "email": "solo@example.com", "agency_id": AGENCY_ID},
        ]
        mock_supabase.fetch_agencies.return_value = [{"id": AGENCY_ID, "name": "Tokyo Fresh"}]

        result = OrderService.list_orders(admin_user)

        solo = next(o for o in result.orders if o.created_by_email == "solo@example.com")
        assert solo.agency_id == AGENCY_ID
        assert solo.agency_name == "Tokyo Fresh"
        mock_supabase.fetch_profiles_by_emails.assert_called_once_with(["solo@example.com"])

    def test_lookup_failure_leaves_rows_unresolved(self, mock_supabase, rows, admin_user):
        mock_supabase.fetch_orders.return_value = rows
        mock_supabase.fetch_profiles_by_emails.side_effect = SupabaseClientError("down")

        result = OrderService.list_orders(admin_user)

        assert len(result.orders) == 3

    def test_read_fallbacks_for_missing_prices(self, mock_supabase, order_row, admin_user):
        order_row.update(unit_price=None, tax_rate=None, pieces_per_sheet=30)
        mock_supabase.fetch_orders.return_value = [order_row]

        order = OrderService.list_orders(admin_user).orders[0]

        assert order.unit_price == 1080
        assert order.tax_rate == 10


# =============================================================================
# Admin Edits
# =============================================================================

class TestUpdateOrder:

    def test_status_required(self, mock_supabase):
        with pytest.raises(InvalidOrderStatusError):
            OrderService.update_order(ORDER_ID, OrderUpdateRequest())

    def test_unknown_status(self, mock_supabase):
        with pytest.raises(InvalidOrderStatusError):
            OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="shipped"))

    def test_unknown_order(self, mock_supabase):
        with pytest.raises(OrderNotFoundError):
            OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="sent"))

    def test_cancel_deletes(self, mock_supabase, order_row):
        mock_supabase.fetch_order.return_value = order_row

        result = OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="canceled"))

        assert isinstance(result, OrderDeleteResponse)
        assert result.deleted_id == ORDER_ID
        mock_supabase.delete_order.assert_called_once_with(ORDER_ID)
        mock_supabase.update_order.assert_not_called()

    def test_status_only(self, mock_supabase, order_row):
        mock_supabase.fetch_order.return_value = order_row
        mock_supabase.update_order.side_effect = None
        mock_supabase.update_order.return_value = {**order_row, "status": "sent"}

        result = OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="sent"))

        mock_supabase.update_order.assert_called_once_with(ORDER_ID, {"status": "sent"})
        assert result.order.status == OrderStatus.SENT

    def test_price_change_recomputes_totals(self, mock_supabase, order_row):
        mock_supabase.fetch_order.return_value = order_row
        mock_supabase.update_order.side_effect = None
        mock_supabase.update_order.return_value = order_row

        OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="pending", unit_price=1500))

        update = mock_supabase.update_order.call_args.args[1]
        assert update == {
            "status": "pending",
            "unit_price": 1500,
            "subtotal": 6000,
            "tax_amount": 600,
            "total_amount": 6600,
        }

    def test_tax_change_uses_stored_price(self, mock_supabase, order_row):
        mock_supabase.fetch_order.return_value = order_row
        mock_supabase.update_order.side_effect = None
        mock_supabase.update_order.return_value = order_row

        OrderService.update_order(ORDER_ID, OrderUpdateRequest(status="sent", tax_rate=8))

        update = mock_supabase.update_order.call_args.args[1]
        assert update["subtotal"] == 5184
        assert update["tax_amount"] == 415
        assert update["total_amount"] == 5599


# =============================================================================
# Resend
# =============================================================================

class TestResendNotification:

    def test_resend_marks_sent(self, mock_supabase, send_email, order_row):
        mock_supabase.fetch_order.return_value = order_row
        mock_supabase.update_order.side_effect = None
        mock_supabase.update_order.return_value = {**order_row, "status": "sent"}

        outcome = OrderService.resend_notification(ORDER_ID)

        assert outcome == {
            "order_id": ORDER_ID,
            "order_number": "ORD-20250301-0001",
            "email_sent": True,
            "status": "sent",
        }

    def test_resend_uses_order_date(self, mock_supabase, send_email, order_row):
        mock_supabase.fetch_order.return_value = order_row
        mock_supabase.update_order.side_effect = None
        mock_supabase.update_order.return_value = order_row

        with patch("core.services.order_service.compose_order_email") as compose:
            compose.return_value = object()
            OrderService.resend_notification(ORDER_ID)

        # 2025-03-01T01:00Z is 10:00 in Tokyo
        assert compose.call_args.args[1].isoformat() == "2025-03-01"

    def test_resend_unknown_order(self, mock_supabase, send_email):
        with pytest.raises(OrderNotFoundError):
            OrderService.resend_notification(ORDER_ID)
