"""
Mock Translation Service

Development stand-in: every text comes back unchanged and every text is
detected as English.
"""

import logging

from foodzy.services.translation.base import DEFAULT_LANGUAGE, BaseTranslationService

logger = logging.getLogger(__name__)


class MockTranslationService(BaseTranslationService):
    """Identity translator for development."""

    def __init__(self):
        logger.info("MockTranslationService initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def translate(self, text: str, target: str, source: str = DEFAULT_LANGUAGE) -> str:
        logger.debug(f"Mock translate {source}->{target}: {text[:40]}")
        return text

    async def detect(self, text: str) -> str:
        return DEFAULT_LANGUAGE
