# =============================================================================
# core/services/backfill_service.py - Data Backfill
# =============================================================================
# Repairs rows written before profiles carried emails and orders carried
# creator / agency / price snapshots:
#
#   1. profiles.email from Supabase Auth (for profiles without one)
#   2. orders.user_id / agency_id via backfill_orders_actor_snapshot()
#   3. orders.unit_price via backfill_orders_price_history()
#
# The database functions are defined in supabase/schema.sql.
# =============================================================================

import logging
from typing import Any

from app.exceptions import BackfillError
from core.models.backfill import BackfillResult
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

AUTH_PAGE_SIZE = 1000
PROFILE_CHUNK_SIZE = 200

ACTOR_SNAPSHOT_RPC = "backfill_orders_actor_snapshot"
PRICE_HISTORY_RPC = "backfill_orders_price_history"


def _first_row(data: Any) -> dict[str, Any]:
    """RPCs returning a table come back as a list; take its first row."""
    if isinstance(data, list):
        return data[0] if data else {}
    return data or {}


class BackfillService:
    """Runs the admin backfill."""

    @staticmethod
    def list_all_auth_users(per_page: int = AUTH_PAGE_SIZE) -> list[dict[str, Any]]:
        """Page through Supabase Auth until a short page comes back."""
        users: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = SupabaseClient.list_auth_users(page=page, per_page=per_page)
            users.extend(batch)
            if len(batch) < per_page:
                return users
            page += 1

    @staticmethod
    def backfill_profile_emails(
        users: list[dict[str, Any]],
        chunk_size: int = PROFILE_CHUNK_SIZE,
    ) -> tuple[int, int]:
        """
        Copy auth emails into profiles that have none.

        Users without an email are skipped. A chunk whose lookup or
        upsert fails is logged and left for the next run.

        Returns:
            (updated_count, skipped_count)
        """
        updated = 0
        skipped = 0

        for start in range(0, len(users), chunk_size):
            chunk = users[start:start + chunk_size]

            try:
                profiles = SupabaseClient.fetch_profiles_by_ids([u["id"] for u in chunk])
            except SupabaseClientError as e:
                logger.error(f"Profile lookup failed for backfill chunk at {start}: {e}")
                continue

            email_by_id = {p["id"]: p.get("email") for p in profiles}

            rows = []
            for user in chunk:
                if not user.get("email"):
                    skipped += 1
                    continue
                if email_by_id.get(user["id"]) is None:
                    rows.append({"id": user["id"], "email": user["email"]})

            if not rows:
                continue

            try:
                SupabaseClient.upsert_profiles(rows)
            except SupabaseClientError as e:
                logger.error(f"Profile upsert failed for backfill chunk at {start}: {e}")
                continue

            updated += len(rows)

        return updated, skipped

    @staticmethod
    def run() -> BackfillResult:
        """
        Run every backfill step.

        Raises:
            BackfillError: If auth users can't be listed or an order
                backfill function fails
        """
        try:
            users = BackfillService.list_all_auth_users()
        except SupabaseClientError as e:
            logger.error(f"Backfill could not list auth users: {e}")
            raise BackfillError("list_auth_users", str(e))

        updated_profiles, skipped = BackfillService.backfill_profile_emails(users)
        logger.info(f"Backfilled {updated_profiles} profile emails ({skipped} users without email)")

        try:
            actor = _first_row(SupabaseClient.call_rpc(ACTOR_SNAPSHOT_RPC))
        except SupabaseClientError as e:
            logger.error(f"Order actor backfill failed: {e}")
            raise BackfillError(ACTOR_SNAPSHOT_RPC, str(e))

        try:
            prices = _first_row(SupabaseClient.call_rpc(PRICE_HISTORY_RPC))
        except SupabaseClientError as e:
            logger.error(f"Order price backfill failed: {e}")
            raise BackfillError(PRICE_HISTORY_RPC, str(e))

        result = BackfillResult(
            updated_profiles_count=updated_profiles,
            updated_orders_user_id_count=int(actor.get("updated_user_id_count") or 0),
            updated_orders_agency_id_count=int(actor.get("updated_agency_id_count") or 0),
            updated_orders_unit_price_count=int(prices.get("updated_unit_price_count") or 0),
            skipped_count=skipped,
        )
        logger.info(f"Backfill finished: {result.model_dump()}")
        return result
