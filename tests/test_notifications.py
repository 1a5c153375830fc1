# =============================================================================
# tests/test_notifications.py - Order Email Tests
# =============================================================================
# Covers email composition, mock/SES dispatch and the SES wrapper.
# boto3 is never called: the SES client is replaced with a MagicMock.
#
# Run with: pytest tests/test_notifications.py -v
# =============================================================================

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from core.models.order import Order
from core.services.notification_service import (
    MOCK_MESSAGE_ID,
    OrderEmail,
    compose_order_email,
    send_order_email,
)
from lib.ses_client import SESMailer


# =============================================================================
# Composition
# =============================================================================

class TestComposeOrderEmail:

    def test_subject_has_agency_and_date(self, order_row):
        email = compose_order_email(Order.from_row(order_row), date(2025, 3, 1))
        assert email.subject == "Strawberry order received (Tokyo Fresh / 2025-03-01)"

    def test_subject_without_agency(self, order_row):
        order_row.update(agency_name="  ")
        email = compose_order_email(Order.from_row(order_row), date(2025, 3, 1))
        assert "(agency not set / 2025-03-01)" in email.subject

    def test_body_sections(self, order_row):
        body = compose_order_email(Order.from_row(order_row), date(2025, 3, 1)).body

        assert "Order number: ORD-20250301-0001" in body
        for section in ("[Product]", "[Delivery address]", "[Requested arrival]", "[Ordered by]"):
            assert section in body
        assert "Pieces per sheet: 20 pieces" in body
        assert "Recipient: Hanako Yamada" in body

    def test_missing_values_print_as_dash(self, order_row):
        order_row.update(delivery_time_note=None, created_by_email=None, pieces_per_sheet=None)
        body = compose_order_email(Order.from_row(order_row), date(2025, 3, 1)).body

        assert "Time / note: -" in body
        assert "Email: -" in body
        assert "Pieces per sheet: -" in body


# =============================================================================
# Dispatch
# =============================================================================

class TestSendOrderEmail:

    EMAIL = OrderEmail(subject="Subject", body="Body")

    def test_mock_mode_returns_mock_id(self):
        with patch("core.services.notification_service.settings") as settings, \
                patch("core.services.notification_service.SESMailer") as mailer:
            settings.ORDER_MAIL_MODE = "mock"

            assert send_order_email(self.EMAIL) == MOCK_MESSAGE_ID
            mailer.send_text_email.assert_not_called()

    def test_ses_mode_uses_mailer(self):
        with patch("core.services.notification_service.settings") as settings, \
                patch("core.services.notification_service.SESMailer") as mailer:
            settings.ORDER_MAIL_MODE = "ses"
            mailer.send_text_email.return_value = "ses-message-1"

            assert send_order_email(self.EMAIL) == "ses-message-1"
            mailer.send_text_email.assert_called_once_with("Subject", "Body")


# =============================================================================
# SES Wrapper
# =============================================================================

class TestSESMailer:

    @pytest.fixture
    def ses_client(self):
        client = MagicMock()
        client.send_email.return_value = {"MessageId": "0100-abc"}
        with patch.object(SESMailer, "get_client", return_value=client):
            yield client

    @pytest.fixture
    def mail_settings(self):
        with patch("lib.ses_client.settings") as settings:
            settings.AWS_REGION = "ap-northeast-1"
            settings.SES_FROM_EMAIL = "orders@example.com"
            settings.ORDER_TO_EMAIL = "supplier@example.com"
            yield settings

    def test_sends_utf8_text(self, ses_client, mail_settings):
        message_id = SESMailer.send_text_email("Subject", "Body")

        assert message_id == "0100-abc"
        kwargs = ses_client.send_email.call_args.kwargs
        assert kwargs["Source"] == "orders@example.com"
        assert kwargs["Destination"] == {"ToAddresses": ["supplier@example.com"]}
        assert kwargs["Message"]["Body"]["Text"]["Charset"] == "UTF-8"

    def test_recipient_override(self, ses_client, mail_settings):
        SESMailer.send_text_email("Subject", "Body", to="other@example.com")

        kwargs = ses_client.send_email.call_args.kwargs
        assert kwargs["Destination"] == {"ToAddresses": ["other@example.com"]}

    def test_skips_without_sender(self, ses_client, mail_settings):
        mail_settings.SES_FROM_EMAIL = None

        assert SESMailer.send_text_email("Subject", "Body") is None
        ses_client.send_email.assert_not_called()

    def test_skips_without_recipient(self, ses_client, mail_settings):
        mail_settings.ORDER_TO_EMAIL = None

        assert SESMailer.send_text_email("Subject", "Body") is None
        ses_client.send_email.assert_not_called()

    def test_ses_errors_propagate(self, ses_client, mail_settings):
        ses_client.send_email.side_effect = ClientError(
            {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
            "SendEmail",
        )

        with pytest.raises(ClientError):
            SESMailer.send_text_email("Subject", "Body")
