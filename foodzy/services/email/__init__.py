"""
Email Service Factory

Returns Mock or SendGrid email service based on ENV_MODE.
"""

import logging
from functools import lru_cache

from foodzy.core.config import get_settings
from foodzy.services.email.base import BaseEmailService, EmailResult
from foodzy.services.email.mock import MockEmailService
from foodzy.services.email.sendgrid import SendGridEmailService

logger = logging.getLogger(__name__)


@lru_cache()
def get_email_service() -> BaseEmailService:
    """Get the configured email service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Email Service: Using MockEmailService (development mode)")
        return MockEmailService(failure_rate=0.05)
    else:
        logger.info(f"Email Service: Using SendGridEmailService ({settings.env_mode.value} mode)")
        return SendGridEmailService()


def reset_email_service() -> None:
    """Clear the cached service instance."""
    get_email_service.cache_clear()


__all__ = [
    "get_email_service",
    "reset_email_service",
    "BaseEmailService",
    "EmailResult",
    "MockEmailService",
    "SendGridEmailService",
]
