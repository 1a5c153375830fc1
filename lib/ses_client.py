# =============================================================================
# lib/ses_client.py - AWS SES Mail Wrapper
# =============================================================================
# Sends plain-text order notifications through Amazon SES using boto3.
#
# Sending is skipped (returns None) when the sender or recipient address is
# not configured, so a missing mail setup never fails an order submission.
#
# Usage:
#   from lib.ses_client import SESMailer
#   message_id = SESMailer.send_text_email(subject, body)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings

logger = logging.getLogger(__name__)


class SESMailer:
    """
    Singleton wrapper around the boto3 SES client.

    The client is created lazily so importing this module never needs
    AWS credentials.
    """

    _instance: Any = None

    @classmethod
    def get_client(cls) -> Any:
        """Get or create the singleton SES client."""
        if cls._instance is None:
            kwargs: dict[str, Any] = {"region_name": settings.AWS_REGION}
            if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
                kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
            cls._instance = boto3.client("ses", **kwargs)
            logger.info(f"SES client initialized for region {settings.AWS_REGION}")
        return cls._instance

    @classmethod
    def send_text_email(
        cls,
        subject: str,
        body_text: str,
        to: str | None = None,
    ) -> str | None:
        """
        Send a UTF-8 plain-text email.

        Args:
            subject: Mail subject
            body_text: Plain-text body
            to: Recipient override (defaults to ORDER_TO_EMAIL)

        Returns:
            SES MessageId, or None if sending was skipped

        Raises:
            ClientError / BotoCoreError: If SES rejects the request
        """
        sender = settings.SES_FROM_EMAIL
        recipient = to or settings.ORDER_TO_EMAIL

        if not settings.AWS_REGION or not sender:
            logger.warning("SES sender or region is not configured; skipping email")
            return None

        if not recipient:
            logger.warning("No order recipient configured (ORDER_TO_EMAIL); skipping email")
            return None

        logger.info(f"Sending email via SES to {recipient}: {subject}")

        try:
            response = cls.get_client().send_email(
                Source=sender,
                Destination={"ToAddresses": [recipient]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": body_text, "Charset": "UTF-8"}},
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"SES send_email failed: {e}")
            raise

        message_id = response.get("MessageId")
        logger.debug(f"SES accepted message {message_id}")
        return message_id
