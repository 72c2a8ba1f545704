"""
Chat Model Factory

Returns the HuggingFace model when an API key is configured, otherwise the
rule-based model.
"""

import logging
from functools import lru_cache

from foodzy.core.config import get_settings
from foodzy.services.assistant.base import BaseChatModel
from foodzy.services.assistant.huggingface import HuggingFaceChatModel
from foodzy.services.assistant.ordering import OrderingAssistant
from foodzy.services.assistant.rules import (
    FOOD_KEYWORDS,
    ORDER_KEYWORDS,
    RuleBasedChatModel,
    extract_food_items,
    is_order_intent,
)

logger = logging.getLogger(__name__)


@lru_cache()
def get_chat_model() -> BaseChatModel:
    """Get the configured chat model."""
    settings = get_settings()

    if settings.huggingface_api_key:
        logger.info("Chat Model: Using HuggingFaceChatModel")
        return HuggingFaceChatModel(
            api_key=settings.huggingface_api_key,
            model_url=settings.huggingface_model_url,
        )

    logger.info("Chat Model: Using RuleBasedChatModel (no HUGGINGFACE_API_KEY)")
    return RuleBasedChatModel()


def reset_chat_model() -> None:
    """Clear the cached model instance."""
    get_chat_model.cache_clear()


__all__ = [
    "get_chat_model",
    "reset_chat_model",
    "BaseChatModel",
    "HuggingFaceChatModel",
    "OrderingAssistant",
    "RuleBasedChatModel",
    "FOOD_KEYWORDS",
    "ORDER_KEYWORDS",
    "extract_food_items",
    "is_order_intent",
]
