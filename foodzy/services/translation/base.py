"""
Translation Service Abstract Base Class

Defines the translate/detect interface. Implementations never raise for
provider problems: translation falls back to the input text and
detection falls back to English.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Sequence

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "ar": "العربية",
    "hi": "हिन्दी",
    "es": "Español",
    "fr": "Français",
}

RTL_LANGUAGES = frozenset({"ar"})


class BaseTranslationService(ABC):
    """Abstract base class for translation services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def translate(self, text: str, target: str, source: str = DEFAULT_LANGUAGE) -> str:
        """Translate ``text``; returns it unchanged on any failure."""
        pass

    @abstractmethod
    async def detect(self, text: str) -> str:
        """Detect the language of ``text``; unsupported or failed -> ``en``."""
        pass

    async def translate_batch(
        self,
        texts: Sequence[str],
        target: str,
        source: str = DEFAULT_LANGUAGE,
    ) -> list[str]:
        """Translate every text concurrently, keeping order."""
        if source == target:
            return list(texts)
        return list(await asyncio.gather(*(self.translate(t, target, source) for t in texts)))

    async def aclose(self) -> None:
        """Release network resources, if any."""
