"""
Bulk Email

Sends one admin-written message to every address in the authentication
directory, one email per recipient, all at once. Partial failures are
reported in the summary and never retried.
"""

import asyncio
import html
import logging

from foodzy.schemas import BulkEmailRequest, BulkEmailResponse
from foodzy.services.email import BaseEmailService
from foodzy.services.gateway import BaseDataGateway

logger = logging.getLogger(__name__)

TARGET_AUDIENCES = ("all",)
MAX_REPORTED_ERRORS = 3


class BulkEmailError(Exception):
    """A request the bulk sender refuses, with the HTTP status to answer."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def render_message(message: str) -> str:
    """Escape the message and keep its line breaks."""
    return "<p>" + html.escape(message).replace("\n", "<br>") + "</p>"


async def resolve_recipients(gateway: BaseDataGateway, target_audience: str) -> list[str]:
    if target_audience not in TARGET_AUDIENCES:
        raise BulkEmailError("Invalid target audience")

    users = await gateway.list_auth_users()
    logger.info(f"Found {len(users)} users")
    return [user.email for user in users if user.email and "@" in user.email]


async def send_bulk_email(
    gateway: BaseDataGateway,
    email_service: BaseEmailService,
    request: BulkEmailRequest,
) -> BulkEmailResponse:
    """
    Send ``request`` to its audience.

    Raises:
        BulkEmailError: Service not configured (500), missing subject or
            message (400), unknown audience (400)
    """
    if not email_service.is_configured:
        logger.error("Email service is not configured")
        raise BulkEmailError(
            "Email service is not configured. Please contact administrator.", 500
        )

    if not request.subject or not request.message:
        raise BulkEmailError("Subject and message are required")

    recipients = await resolve_recipients(gateway, request.target_audience)
    logger.info(f"Valid recipients: {len(recipients)}")

    if not recipients:
        return BulkEmailResponse(success=True, message="No valid recipients found")

    body_html = render_message(request.message)
    results = await asyncio.gather(
        *(
            email_service.send_email(email, request.subject, body_html, body_text=request.message)
            for email in recipients
        ),
        return_exceptions=True,
    )

    errors = []
    sent = 0
    for result in results:
        if isinstance(result, BaseException):
            errors.append(str(result) or "Unknown error")
        elif result.success:
            sent += 1
        else:
            errors.append(result.error_message or "Unknown error")
    failed = len(errors)

    logger.info(f"Email sending complete: {sent} successful, {failed} failed")

    if failed:
        logger.error(f"Some emails failed: {errors[:MAX_REPORTED_ERRORS]}")
        return BulkEmailResponse(
            success=True,
            message=f"Sent {sent} emails successfully, {failed} failed",
            sent=sent,
            failed=failed,
            errors=errors[:MAX_REPORTED_ERRORS],
        )

    return BulkEmailResponse(
        success=True,
        message=f"Successfully sent {sent} emails",
        sent=sent,
    )
