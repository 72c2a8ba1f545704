"""
LibreTranslate Translation Service

Production implementation using a LibreTranslate server.
Used when ENV_MODE=production or ENV_MODE=staging.

API Documentation:
    https://libretranslate.com/docs
"""

import asyncio
import logging
from typing import Optional

import httpx

from foodzy.services.translation.base import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    BaseTranslationService,
)

logger = logging.getLogger(__name__)


class LibreTranslateService(BaseTranslationService):
    """
    LibreTranslate client.

    Example:
        >>> service = LibreTranslateService("https://libretranslate.com")
        >>> await service.translate("Add to Cart", target="fr")
        'Ajouter au panier'
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._client_lock = asyncio.Lock()
        logger.info(f"LibreTranslateService initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        return "libretranslate"

    async def _get_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self.timeout)
            return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, payload: dict) -> Optional[httpx.Response]:
        if self.api_key:
            payload = {**payload, "api_key": self.api_key}

        client = await self._get_client()
        try:
            response = await client.post(f"{self.base_url}{path}", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"LibreTranslate {path} error: {e}")
            return None

        if not response.is_success:
            logger.error(f"LibreTranslate {path} error: {response.status_code} {response.text[:200]}")
            return None
        return response

    async def translate(self, text: str, target: str, source: str = DEFAULT_LANGUAGE) -> str:
        if source == target:
            return text

        response = await self._post(
            "/translate",
            {"q": text, "source": source, "target": target, "format": "text"},
        )
        if response is None:
            return text

        try:
            data = response.json()
        except ValueError:
            logger.error("LibreTranslate returned a non-JSON body")
            return text
        return data.get("translatedText") or text

    async def detect(self, text: str) -> str:
        response = await self._post("/detect", {"q": text})
        if response is None:
            return DEFAULT_LANGUAGE

        try:
            data = response.json()
        except ValueError:
            return DEFAULT_LANGUAGE

        language = data[0].get("language") if isinstance(data, list) and data else None
        return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE
