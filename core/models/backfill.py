# =============================================================================
# core/models/backfill.py - Backfill Result Schema
# =============================================================================

from pydantic import BaseModel, Field


class BackfillResult(BaseModel):
    """
    Counts reported by POST /admin/backfill.

    Example:
        {
            "updated_profiles_count": 3,
            "updated_orders_user_id_count": 12,
            "updated_orders_agency_id_count": 12,
            "updated_orders_unit_price_count": 4,
            "skipped_count": 1
        }
    """

    updated_profiles_count: int = Field(0, ge=0, description="Profiles whose email was filled in")
    updated_orders_user_id_count: int = Field(0, ge=0, description="Orders linked to their creator")
    updated_orders_agency_id_count: int = Field(0, ge=0, description="Orders linked to an agency")
    updated_orders_unit_price_count: int = Field(0, ge=0, description="Orders priced from price history")
    skipped_count: int = Field(0, ge=0, description="Auth users without an email address")
