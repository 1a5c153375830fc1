# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the order, product and user models:
# - Rows from the database map to API models
# - Request models accept camelCase and snake_case keys
# - Status and role values are normalized
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    AdminUser,
    CurrentUser,
    Order,
    OrderCreateRequest,
    OrderStatus,
    OrderUpdateRequest,
    Role,
    UserUpdateRequest,
    find_product,
    pieces_per_sheet_options,
)
from tests.conftest import AGENCY_ID


# =============================================================================
# Order Models
# =============================================================================

class TestOrderStatus:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("pending", OrderStatus.PENDING),
            ("sent", OrderStatus.SENT),
            ("shipped", OrderStatus.SENT),
            ("canceled", OrderStatus.CANCELED),
            ("archived", OrderStatus.PENDING),
            (None, OrderStatus.PENDING),
        ],
    )
    def test_from_raw(self, raw, expected):
        assert OrderStatus.from_raw(raw) == expected

    def test_values(self):
        assert OrderStatus.values() == ["pending", "sent", "canceled"]


class TestOrder:

    def test_from_row(self, order_row):
        order = Order.from_row(order_row)

        assert order.order_number == "ORD-20250301-0001"
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == 5702

    def test_from_row_nulls_become_empty_text(self, order_row):
        order_row.update(product_name=None, recipient_name=None, status="shipped")

        order = Order.from_row(order_row)

        assert order.product_name == ""
        assert order.recipient_name == ""
        assert order.status == OrderStatus.SENT

    def test_from_row_overrides(self, order_row):
        order = Order.from_row(order_row, agency_name="Override")
        assert order.agency_name == "Override"

    def test_billing_month_prefers_delivery_date(self, order_row):
        assert Order.from_row(order_row).billing_month == "2025-03"

    def test_billing_month_falls_back_to_created_at(self, order_row):
        order_row.update(delivery_date=None, created_at="2025-02-27T10:00:00+00:00")
        assert Order.from_row(order_row).billing_month == "2025-02"


class TestOrderRequests:

    def test_create_request_accepts_camel_case(self, order_form):
        request = OrderCreateRequest(**order_form)

        assert request.product_id == "p1"
        assert request.pieces_per_sheet == 20
        assert request.postal_and_address.startswith("100-0001")

    def test_create_request_accepts_snake_case(self):
        request = OrderCreateRequest(product_id="p2", pieces_per_sheet=24)
        assert request.product_id == "p2"

    def test_create_request_rejects_negative_price(self):
        with pytest.raises(ValidationError):
            OrderCreateRequest(unit_price=-1)

    def test_update_request_tax_rate_bounds(self):
        with pytest.raises(ValidationError):
            OrderUpdateRequest(status="sent", tax_rate=101)


# =============================================================================
# Product Models
# =============================================================================

class TestProducts:

    def test_find_product(self):
        assert find_product("p3").is_winter
        assert find_product("missing") is None
        assert find_product(None) is None

    def test_pieces_per_sheet_options(self):
        assert pieces_per_sheet_options() == [36, 30, 24, 20]


# =============================================================================
# User Models
# =============================================================================

class TestUsers:

    def test_role_parse(self):
        assert Role.parse("admin") == Role.ADMIN
        assert Role.parse("owner") is None
        assert Role.parse(None) is None

    def test_admin_user_from_profile(self, profile_rows, agency_rows):
        user = AdminUser.from_profile(profile_rows[1], agency_rows, auth_email="auth@example.com")

        assert user.display_name == "(unnamed)"
        assert user.email == "auth@example.com"
        assert user.agency_name == "Tokyo Fresh"

    def test_admin_user_email_falls_back_to_profile(self, profile_rows, agency_rows):
        user = AdminUser.from_profile(profile_rows[0], agency_rows)
        assert user.email == "admin@example.com"
        assert user.agency_name is None

    def test_admin_user_skips_invalid_role(self, profile_rows, agency_rows):
        assert AdminUser.from_profile(profile_rows[2], agency_rows) is None

    def test_update_request_tracks_explicit_null(self):
        request = UserUpdateRequest.model_validate({"agencyId": None})
        assert "agency_id" in request.model_fields_set

        assert "agency_id" not in UserUpdateRequest.model_validate({}).model_fields_set

    def test_current_user_is_admin(self, admin_user, agency_user):
        assert admin_user.is_admin
        assert not agency_user.is_admin
        assert agency_user.agency_id == AGENCY_ID

    def test_current_user_is_frozen(self, admin_user):
        with pytest.raises(ValidationError):
            admin_user.email = "other@example.com"

    def test_current_user_without_profile(self):
        user = CurrentUser(id="44444444-4444-4444-4444-444444444444")
        assert user.role is None
        assert not user.is_admin
