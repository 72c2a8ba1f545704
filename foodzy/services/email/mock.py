"""
Mock Email Service

Simulates email sending for development.
No actual messages are sent - just logged and kept in ``outbox``.
"""

import asyncio
import logging
import random
import uuid
from typing import Iterable, Optional

from foodzy.services.email.base import BaseEmailService, EmailResult

logger = logging.getLogger(__name__)


class MockEmailService(BaseEmailService):
    """
    Mock email service for development.

    Attributes:
        failure_rate: Probability (0.0-1.0) of a simulated failure
        failing_recipients: Addresses that always fail
        outbox: Every successfully "sent" email as (to, subject, html)
    """

    def __init__(
        self,
        failure_rate: float = 0.05,
        latency: tuple[float, float] = (0.1, 0.3),
        failing_recipients: Iterable[str] = (),
    ):
        self.failure_rate = failure_rate
        self.latency = latency
        self.failing_recipients = set(failing_recipients)
        self.outbox: list[tuple[str, str, str]] = []
        logger.info(f"MockEmailService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        low, high = self.latency
        if high > 0:
            await asyncio.sleep(random.uniform(low, high))

    def _should_fail(self, to_email: str) -> bool:
        return to_email in self.failing_recipients or random.random() < self.failure_rate

    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> EmailResult:
        """Simulate sending email."""
        await self._simulate_latency()

        if self._should_fail(to_email):
            logger.warning(f"Mock email failed (simulated) to {to_email}")
            return EmailResult(
                success=False,
                recipient=to_email,
                error_message=f"Simulated email failure for {to_email}",
                provider="mock",
            )

        message_id = f"email_mock_{uuid.uuid4().hex[:12]}"
        self.outbox.append((to_email, subject, body_html))
        logger.info(f"Mock email sent to {to_email}: {subject} (ID: {message_id})")

        return EmailResult(
            success=True,
            recipient=to_email,
            message_id=message_id,
            provider="mock",
        )
