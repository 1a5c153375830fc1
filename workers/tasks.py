# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background jobs for the order desk:
# - send_order_notification: (re)send the email of a saved order
# =============================================================================

import logging
from typing import Any

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Order Notification Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_order_notification")
def send_order_notification(self, order_id: str) -> dict[str, Any]:
    """
    Send the notification email of an order and mark it sent.

    Mail service failures are retried (see CeleryConfig.task_annotations);
    a missing order is reported without retrying.

    Args:
        order_id: The order UUID

    Returns:
        Dict with success, order_number, email_sent and status
    """
    logger.info(f"Sending notification for order {order_id}")

    from app.exceptions import EmailDeliveryError, OrderNotFoundError
    from core.services.order_service import OrderService

    try:
        outcome = OrderService.resend_notification(order_id)
    except OrderNotFoundError as e:
        logger.warning(f"Order {order_id} not found; nothing to send")
        return {"success": False, "error": e.message}
    except EmailDeliveryError as e:
        logger.error(f"Email for order {order_id} failed (attempt {self.request.retries + 1}): {e.message}")
        raise self.retry(exc=e)

    return {"success": True, **outcome}
