"""
HuggingFace Chat Model

Conversational model behind the HuggingFace Inference API.
Used when HUGGINGFACE_API_KEY is set.

Every turn sends the full visible transcript. Network errors, non-2xx
answers and empty generations fall back to the rule-based model.
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from foodzy.schemas import ChatMessage
from foodzy.services.assistant.base import BaseChatModel
from foodzy.services.assistant.rules import RuleBasedChatModel

logger = logging.getLogger(__name__)


class HuggingFaceChatModel(BaseChatModel):
    """
    Hosted text-generation model.

    Example:
        >>> model = HuggingFaceChatModel(api_key="hf_...", model_url=settings.huggingface_model_url)
        >>> await model.reply("Do you have pizza?", history)
    """

    def __init__(
        self,
        api_key: str,
        model_url: str,
        client: Optional[httpx.AsyncClient] = None,
        fallback: Optional[BaseChatModel] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model_url = model_url
        self.timeout = timeout
        self.fallback = fallback or RuleBasedChatModel()
        self._client = client
        self._client_lock = asyncio.Lock()
        logger.info(f"HuggingFaceChatModel initialized ({model_url.rsplit('/', 1)[-1]})")

    @property
    def provider_name(self) -> str:
        return "huggingface"

    async def _get_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self.timeout)
            return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def build_payload(message: str, history: Sequence[ChatMessage]) -> dict:
        return {
            "inputs": {
                "past_user_inputs": [m.content for m in history if m.role == "user"],
                "generated_responses": [m.content for m in history if m.role == "assistant"],
                "text": message,
            }
        }

    async def reply(self, message: str, history: Sequence[ChatMessage] = ()) -> str:
        client = await self._get_client()

        try:
            response = await client.post(
                self.model_url,
                json=self.build_payload(message, history),
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Chatbot error: {e}")
            return await self.fallback.reply(message, history)

        if not response.is_success:
            logger.error(f"HuggingFace API error: {response.status_code} {response.text[:200]}")
            return await self.fallback.reply(message, history)

        try:
            data = response.json()
        except ValueError:
            logger.error("HuggingFace API returned a non-JSON body")
            return await self.fallback.reply(message, history)

        # Some deployments wrap the generation in a one-element list
        if isinstance(data, list):
            data = data[0] if data else {}
        generated = data.get("generated_text") if isinstance(data, dict) else None

        if not generated:
            logger.warning("HuggingFace API returned no generated_text")
            return await self.fallback.reply(message, history)
        return generated
