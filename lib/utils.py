# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
import secrets
import uuid
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        order_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        order_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Text Utilities
# =============================================================================

def clean_text(value: object) -> str:
    """Trim a free-text form value; None and non-strings become ''."""
    return value.strip() if isinstance(value, str) else ""


def slugify(name: str, max_length: int = 24) -> str:
    """
    Build a unique agency code from a display name.

    Lowercases, turns whitespace into hyphens, drops everything outside
    [a-z0-9-], truncates, then appends 8 random hex characters.

    Example:
        slugify("Tokyo Fresh Co")  # "tokyo-fresh-co-1a2b3c4d"
        slugify("東京青果")         # "agency-1a2b3c4d"
    """
    base = re.sub(r"\s+", "-", name.lower())
    base = re.sub(r"[^a-z0-9-]", "", base)[:max_length]
    return f"{base or 'agency'}-{uuid.uuid4().hex[:8]}"


def generate_password(num_bytes: int = 16) -> str:
    """Random URL-safe initial password for admin-created accounts."""
    return secrets.token_urlsafe(num_bytes)


# =============================================================================
# Number Utilities
# =============================================================================

def round_half_up(value: Decimal | int | float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding; tax amounts round 0.5 up.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
