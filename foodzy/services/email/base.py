"""
Email Service Abstract Base Class

Defines the interface for sending transactional email.
Supports both Mock (development) and SendGrid (production) implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class EmailResult:
    """Result from sending one email."""
    success: bool
    recipient: str
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


class BaseEmailService(ABC):
    """Abstract base class for email services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @property
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        return True

    @abstractmethod
    async def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
    ) -> EmailResult:
        """Send one email."""
        pass

    async def health_check(self) -> bool:
        """Check service readiness."""
        return self.is_configured
