"""
SendGrid Email Service

Production implementation using SendGrid's v3 Mail Send API.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - SENDGRID_API_KEY
    - SENDGRID_FROM_EMAIL (a verified sender)
"""

import asyncio
import logging
from typing import Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from foodzy.core.config import get_settings
from foodzy.services.email.base import BaseEmailService, EmailResult

logger = logging.getLogger(__name__)


class SendGridEmailService(BaseEmailService):
    """Production email service using SendGrid."""

    def __init__(self):
        settings = get_settings()

        if settings.sendgrid_api_key:
            self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)
        else:
            self.sendgrid_client = None
            logger.warning("SendGrid credentials not configured")

        self.sendgrid_from_email = settings.sendgrid_from_email
        self.from_name = settings.restaurant_name

        logger.info("SendGridEmailService initialized")

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    @property
    def is_configured(self) -> bool:
        return self.sendgrid_client is not None

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> EmailResult:
        """Send email via SendGrid."""
        if not self.sendgrid_client:
            return EmailResult(
                success=False,
                recipient=to_email,
                error_message="SendGrid not configured",
                provider="sendgrid",
            )

        message = Mail(
            from_email=(self.sendgrid_from_email, self.from_name),
            to_emails=to_email,
            subject=subject,
            html_content=body_html,
            plain_text_content=body_text,
        )

        try:
            # The SendGrid client is blocking
            response = await asyncio.to_thread(self.sendgrid_client.send, message)
        except HTTPError as e:
            logger.error(f"SendGrid error for {to_email}: {e}")
            return EmailResult(
                success=False,
                recipient=to_email,
                error_message=str(e),
                provider="sendgrid",
            )

        logger.info(f"Email sent to {to_email}: {response.status_code}")

        return EmailResult(
            success=response.status_code in (200, 201, 202),
            recipient=to_email,
            message_id=response.headers.get("X-Message-Id"),
            error_message=None if response.status_code < 300 else f"HTTP {response.status_code}",
            provider="sendgrid",
        )
