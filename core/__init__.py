# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the order desk business logic:
# - models/: Pydantic schemas for products, orders and users
# - services/: Validation, pricing, notifications, orders, users, backfill
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
