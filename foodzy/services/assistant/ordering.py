"""
Ordering Assistant

Handles one chat turn:
    1. Order intent with a known food keyword: look up available items
       whose name contains the first keyword, add the first match to the
       cart at its current price and confirm
    2. Anything else: the configured chat model answers

Nothing about the conversation is kept server-side; the caller sends the
visible transcript with every turn.
"""

import logging
from typing import Sequence

from foodzy.schemas import ChatMessage, ChatResponse
from foodzy.services.assistant.base import BaseChatModel
from foodzy.services.assistant.rules import extract_food_items, is_order_intent
from foodzy.services.cart import CartStore
from foodzy.services.gateway import BaseDataGateway

logger = logging.getLogger(__name__)

NOT_FOUND_REPLY = (
    "I couldn't find that specific item. 😕\n"
    "Would you like to see our popular categories instead?"
)
TROUBLE_REPLY = "I'm having a little trouble connecting right now. Please try again in a moment! 🙏"


def confirmation_reply(names: list[str]) -> str:
    reply = f"Great choice! I've added {names[0]} to your cart. 🛒\n"
    if len(names) > 1:
        return reply + f"We also have {', '.join(names[1:])}. Would you like to try those?"
    return reply + "Anything else for your order?"


class OrderingAssistant:
    """
    Chat turn handler that can add food to the caller's cart.

    Attributes:
        gateway: Data gateway used for the food lookup
        model: Chat model for everything that is not a direct order
        match_limit: Food items fetched per keyword lookup
    """

    def __init__(self, gateway: BaseDataGateway, model: BaseChatModel, match_limit: int = 3):
        self.gateway = gateway
        self.model = model
        self.match_limit = match_limit

    async def handle(
        self,
        store: CartStore,
        message: str,
        history: Sequence[ChatMessage] = (),
    ) -> ChatResponse:
        try:
            return await self._handle(store, message.strip(), history)
        except Exception as e:
            logger.exception(f"Chatbot error: {e}")
            return ChatResponse(reply=TROUBLE_REPLY)

    async def _handle(
        self,
        store: CartStore,
        message: str,
        history: Sequence[ChatMessage],
    ) -> ChatResponse:
        order_intent = is_order_intent(message)
        keywords = extract_food_items(message) if order_intent else []

        if not keywords:
            reply = await self.model.reply(message, history)
            return ChatResponse(reply=reply, order_intent=order_intent)

        matches = await self.gateway.select(
            "food_items",
            eq={"is_available": True},
            ilike={"name": f"%{keywords[0]}%"},
            limit=self.match_limit,
        )
        if not matches:
            logger.info(f"No food item matches '{keywords[0]}'")
            return ChatResponse(reply=NOT_FOUND_REPLY, order_intent=True)

        first = matches[0]
        added = await store.add_item(first["id"], 1, first["current_price"])

        return ChatResponse(
            reply=confirmation_reply([row["name"] for row in matches]),
            order_intent=True,
            added_food_item_id=first["id"] if added else None,
            alert=store.alert,
        )
