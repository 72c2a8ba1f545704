"""
Rule-Based Chat Model

Keyword-driven replies used when no hosted model is configured and as the
fallback whenever the hosted model fails. Also home of the keyword sets
the assistant uses to spot order intent.
"""

import re
from typing import Sequence

from foodzy.schemas import ChatMessage
from foodzy.services.assistant.base import BaseChatModel

ORDER_KEYWORDS = ("order", "want", "get", "buy", "add", "cart")

FOOD_KEYWORDS = (
    "burger", "pizza", "pasta", "salad", "sandwich", "fries",
    "chicken", "beef", "fish", "vegetarian", "vegan",
    "margherita", "pepperoni", "carbonara", "alfredo",
    "caesar", "greek", "coffee", "tea", "juice", "smoothie",
    "cake", "ice cream", "dessert",
)

GREETING = re.compile(r"^(hi|hello|hey|good morning|good evening)")


def is_order_intent(message: str) -> bool:
    lowered = message.lower()
    return any(keyword in lowered for keyword in ORDER_KEYWORDS)


def extract_food_items(message: str) -> list[str]:
    """Food keywords contained in ``message``, in vocabulary order."""
    lowered = message.lower()
    return [keyword for keyword in FOOD_KEYWORDS if keyword in lowered]


def _contains(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


class RuleBasedChatModel(BaseChatModel):
    """Deterministic keyword responder."""

    @property
    def provider_name(self) -> str:
        return "rules"

    async def reply(self, message: str, history: Sequence[ChatMessage] = ()) -> str:
        return self.respond(message)

    def respond(self, message: str) -> str:
        text = message.lower()

        if GREETING.match(text):
            return (
                "Hello! 👋 I'm your food ordering assistant. I can help you find and order "
                "delicious food. What would you like to eat today?"
            )

        if _contains(text, "order", "want", "get"):
            return self._order_reply(text)

        if _contains(text, "menu", "what do you have"):
            return (
                "We have a wide variety of delicious options! 🍽️ Our menu includes:\n"
                "• Burgers 🍔\n• Pizzas 🍕\n• Pasta 🍝\n• Salads 🥗\n• Desserts 🍰\n"
                "• Beverages 🥤\n\nWhat would you like to explore?"
            )

        if _contains(text, "vegetarian", "vegan"):
            return (
                "We have great vegetarian and vegan options! 🌱 "
                "Let me show you our plant-based menu items."
            )

        if _contains(text, "price", "cost", "how much"):
            return (
                "Our prices vary by item. You can browse our menu to see detailed pricing. "
                "Most items range from ₹150 to ₹500. Would you like to see a specific category?"
            )

        if _contains(text, "delivery", "deliver"):
            return (
                "We deliver to your location! 🚚 Delivery typically takes 30-45 minutes. "
                "You can track your order in real-time once it's placed."
            )

        if "help" in text:
            return (
                "I'm here to help! You can:\n• Ask about our menu\n"
                "• Order food by telling me what you want\n• Check delivery options\n"
                "• Ask about prices\n\nJust let me know what you need!"
            )

        return (
            "I'm here to help you order food! You can tell me what you'd like to eat, "
            "ask about our menu, or browse our categories. What can I get for you today? 😊"
        )

    def _order_reply(self, text: str) -> str:
        if "burger" in text:
            return (
                "Great choice! 🍔 We have several burger options. Let me show you our burger "
                "menu. Would you like a classic beef burger, chicken burger, or veggie burger?"
            )
        if "pizza" in text:
            return (
                "Excellent! 🍕 We have amazing pizzas. Would you prefer Margherita, "
                "Pepperoni, Vegetarian, or BBQ Chicken pizza?"
            )
        if "pasta" in text:
            return (
                "Wonderful! 🍝 Our pasta dishes are delicious. We have Carbonara, Bolognese, "
                "Alfredo, and Pesto pasta. Which one sounds good?"
            )
        if "salad" in text:
            return (
                "Healthy choice! 🥗 We have Caesar Salad, Greek Salad, and Garden Fresh "
                "Salad. Which would you like?"
            )
        if _contains(text, "drink", "beverage"):
            return (
                "Sure! 🥤 We have soft drinks, juices, smoothies, and coffee. "
                "What would you like to drink?"
            )
        return (
            "I'd be happy to help you order! Could you tell me what type of food you're "
            "craving? We have burgers, pizzas, pasta, salads, and more!"
        )
