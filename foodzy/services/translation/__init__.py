"""
Translation Service Factory

Returns Mock or LibreTranslate service based on ENV_MODE.
"""

import logging
from functools import lru_cache

from foodzy.core.config import get_settings
from foodzy.services.translation.base import (
    DEFAULT_LANGUAGE,
    RTL_LANGUAGES,
    SUPPORTED_LANGUAGES,
    BaseTranslationService,
)
from foodzy.services.translation.libretranslate import LibreTranslateService
from foodzy.services.translation.mock import MockTranslationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_translation_service() -> BaseTranslationService:
    """Get the configured translation service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Translation Service: Using MockTranslationService (development mode)")
        return MockTranslationService()
    else:
        logger.info(f"Translation Service: Using LibreTranslateService ({settings.env_mode.value} mode)")
        return LibreTranslateService(settings.libretranslate_url, settings.libretranslate_api_key)


def reset_translation_service() -> None:
    """Clear the cached service instance."""
    get_translation_service.cache_clear()


__all__ = [
    "get_translation_service",
    "reset_translation_service",
    "BaseTranslationService",
    "LibreTranslateService",
    "MockTranslationService",
    "DEFAULT_LANGUAGE",
    "RTL_LANGUAGES",
    "SUPPORTED_LANGUAGES",
]
