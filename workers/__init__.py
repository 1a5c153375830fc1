# =============================================================================
# workers/ - Background Email Delivery
# =============================================================================
# Celery app and tasks for re-sending order notification emails outside the
# request cycle. Broker and result backend are both Redis.
#
#   celery -A workers.celery_app worker -Q default,mail --loglevel=info
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = ["celery_app", "tasks"]
