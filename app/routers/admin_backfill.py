# =============================================================================
# app/routers/admin_backfill.py - Backfill Endpoint
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import AdminDep
from core.models.backfill import BackfillResult
from core.services.backfill_service import BackfillService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=BackfillResult)
async def run_backfill(admin: AdminDep):
    """
    Fill profile emails and order creator/agency/price snapshots.

    Safe to re-run: only empty values are filled.
    """
    logger.info(f"Admin {admin.id} started a backfill")
    return BackfillService.run()
