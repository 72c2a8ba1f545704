"""
Shared Route Dependencies

Per-request objects built from the gateway, the caller's identity and the
cached service factories. Tests swap any of them through
``app.dependency_overrides``.
"""

from typing import Optional

from fastapi import Depends

from foodzy.core.config import Settings, get_settings
from foodzy.services.assistant import BaseChatModel, OrderingAssistant, get_chat_model
from foodzy.services.auth import get_current_identity, get_optional_identity
from foodzy.services.cart import CartStore
from foodzy.services.gateway import AuthUser, BaseDataGateway, get_gateway
from foodzy.services.voice import VoiceHandler


async def get_cart_store(
    identity: AuthUser = Depends(get_current_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> CartStore:
    return await CartStore.load(gateway, identity.id)


async def get_optional_cart_store(
    identity: Optional[AuthUser] = Depends(get_optional_identity),
    gateway: BaseDataGateway = Depends(get_gateway),
) -> CartStore:
    """Cart of the caller, or an unbound store for anonymous visitors."""
    return await CartStore.load(gateway, identity.id if identity else None)


def get_assistant(
    gateway: BaseDataGateway = Depends(get_gateway),
    model: BaseChatModel = Depends(get_chat_model),
    settings: Settings = Depends(get_settings),
) -> OrderingAssistant:
    return OrderingAssistant(gateway, model, match_limit=settings.chat_match_limit)


def get_voice_handler(
    assistant: OrderingAssistant = Depends(get_assistant),
    settings: Settings = Depends(get_settings),
) -> VoiceHandler:
    return VoiceHandler(assistant, enabled=settings.voice_enabled)
