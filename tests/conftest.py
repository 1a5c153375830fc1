# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides common row / user fixtures for service and API tests
# =============================================================================

import os
from datetime import date, timedelta
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ORDER_MAIL_MODE", "mock")
os.environ.setdefault("ORDER_TIMEZONE", "Asia/Tokyo")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.user import CurrentUser, Role

ADMIN_ID = UUID("11111111-1111-1111-1111-111111111111")
AGENCY_USER_ID = UUID("22222222-2222-2222-2222-222222222222")
AGENCY_ID = "aaaaaaaa-0000-0000-0000-000000000001"
OTHER_AGENCY_ID = "aaaaaaaa-0000-0000-0000-000000000002"
ORDER_ID = "bbbbbbbb-0000-0000-0000-000000000001"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def admin_user():
    """An authenticated administrator."""
    return CurrentUser(id=ADMIN_ID, email="admin@example.com", role=Role.ADMIN)


@pytest.fixture
def agency_user():
    """An authenticated agency user."""
    return CurrentUser(
        id=AGENCY_USER_ID,
        email="agent@tokyo-fresh.example",
        role=Role.AGENCY,
        agency_id=AGENCY_ID,
    )


@pytest.fixture
def order_row():
    """A saved order as returned by the orders table."""
    return {
        "id": ORDER_ID,
        "order_number": "ORD-20250301-0001",
        "product_id": "p1",
        "product_name": "Summer strawberries",
        "pieces_per_sheet": 20,
        "quantity": 4,
        "postal_and_address": "100-0001 Chiyoda 1-1, Tokyo",
        "recipient_name": "Hanako Yamada",
        "phone_number": "03-0000-0000",
        "delivery_date": "2025-03-10",
        "delivery_time_note": "Morning",
        "agency_id": AGENCY_ID,
        "agency_name": "Tokyo Fresh",
        "created_by_email": "agent@tokyo-fresh.example",
        "status": "pending",
        "created_at": "2025-03-01T01:00:00+00:00",
        "unit_price": 1296,
        "tax_rate": 10,
        "subtotal": 5184,
        "tax_amount": 518,
        "total_amount": 5702,
    }


@pytest.fixture
def order_form():
    """A valid order form submission (camelCase, as the form sends it)."""
    return {
        "productId": "p1",
        "quantity": 4,
        "piecesPerSheet": 20,
        "postalAndAddress": "100-0001 Chiyoda 1-1, Tokyo",
        "recipientName": "Hanako Yamada",
        "phoneNumber": "03-0000-0000",
        "deliveryDate": (date.today() + timedelta(days=30)).isoformat(),
        "deliveryTimeNote": "Morning",
    }


@pytest.fixture
def profile_rows():
    """Profiles as returned by the profiles table."""
    return [
        {
            "id": str(ADMIN_ID),
            "display_name": "Admin",
            "role": "admin",
            "agency_id": None,
            "email": "admin@example.com",
        },
        {
            "id": str(AGENCY_USER_ID),
            "display_name": None,
            "role": "agency",
            "agency_id": AGENCY_ID,
            "email": "agent@tokyo-fresh.example",
        },
        {
            "id": "33333333-3333-3333-3333-333333333333",
            "display_name": "Pending signup",
            "role": None,
            "agency_id": None,
            "email": "new@example.com",
        },
    ]


@pytest.fixture
def agency_rows():
    """Agencies as returned by the agencies table."""
    return [
        {"id": AGENCY_ID, "name": "Tokyo Fresh", "code": "tokyo-fresh-1a2b3c4d"},
        {"id": OTHER_AGENCY_ID, "name": "Osaka Berries", "code": "osaka-berries-5e6f7a8b"},
    ]
