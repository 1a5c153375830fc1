# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable wrappers around external services:
# - supabase_client.py: Typed Supabase wrapper for database and auth admin calls
# - ses_client.py: AWS SES wrapper for order notification emails
# - utils.py: Shared utilities (UUID normalization, slugs, rounding)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.ses_client import SESMailer
from lib.utils import (
    clean_text,
    generate_password,
    normalize_uuid,
    round_half_up,
    slugify,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Mail
    "SESMailer",
    # Utils
    "clean_text",
    "generate_password",
    "normalize_uuid",
    "round_half_up",
    "slugify",
]
