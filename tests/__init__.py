# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the OrderDesk API:
# - test_validation.py / test_pricing.py: Order rules and amounts
# - test_models.py: Pydantic model mapping and normalization
# - test_order_service.py / test_user_service.py / test_backfill_service.py:
#   Services against a mocked SupabaseClient
# - test_notifications.py: Email composition and the SES wrapper
# - test_api.py: HTTP routes through TestClient
# - test_workers.py: Celery tasks
#
# Run tests with: pytest
# =============================================================================
