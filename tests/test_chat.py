import json

import httpx
import pytest

from foodzy.core.config import Settings, get_settings
from foodzy.schemas import ChatMessage, VoiceTranscript
from foodzy.services.assistant import (
    BaseChatModel,
    HuggingFaceChatModel,
    OrderingAssistant,
    RuleBasedChatModel,
    extract_food_items,
    is_order_intent,
)
from foodzy.services.assistant.ordering import NOT_FOUND_REPLY, TROUBLE_REPLY
from foodzy.services.cart import LOGIN_REQUIRED, CartStore
from foodzy.services.voice import VOICE_UNSUPPORTED, VoiceHandler, VoiceUnavailable

from conftest import auth_headers

MODEL_URL = "https://api-inference.huggingface.co/models/test-model"


class BrokenModel(BaseChatModel):
    @property
    def provider_name(self) -> str:
        return "broken"

    async def reply(self, message, history=()):
        raise RuntimeError("model crashed")


def test_keyword_detection():
    assert is_order_intent("Can I GET a pizza?")
    assert not is_order_intent("hello there")
    assert extract_food_items("I want a burger and fries") == ["burger", "fries"]
    assert extract_food_items("nothing here") == []


@pytest.mark.asyncio
async def test_order_intent_adds_first_match(gateway, food_factory):
    burger = await food_factory("Classic Cheeseburger", 12.99)
    store = await CartStore.load(gateway, "user-1")
    assistant = OrderingAssistant(gateway, RuleBasedChatModel())

    response = await assistant.handle(store, "I want a burger")

    assert response.reply == (
        "Great choice! I've added Classic Cheeseburger to your cart. 🛒\n"
        "Anything else for your order?"
    )
    assert response.order_intent is True
    assert response.added_food_item_id == burger["id"]
    assert store.items[0].price_at_add == pytest.approx(12.99)


@pytest.mark.asyncio
async def test_other_matches_are_suggested(gateway, food_factory):
    await food_factory("Margherita Pizza", 14.99)
    await food_factory("Pepperoni Pizza", 16.99)
    await food_factory("BBQ Pizza", 15.99, is_available=False)
    store = await CartStore.load(gateway, "user-1")

    response = await OrderingAssistant(gateway, RuleBasedChatModel()).handle(store, "add a pizza please")

    assert response.reply.startswith("Great choice! I've added ")
    assert response.reply.endswith(". Would you like to try those?")
    assert "BBQ Pizza" not in response.reply
    assert store.item_count == 1


@pytest.mark.asyncio
async def test_no_matching_item(gateway):
    store = await CartStore.load(gateway, "user-1")

    response = await OrderingAssistant(gateway, RuleBasedChatModel()).handle(store, "I want a smoothie")

    assert response.reply == NOT_FOUND_REPLY
    assert store.items == []


@pytest.mark.asyncio
async def test_anonymous_order_gets_login_alert(gateway, food_factory):
    await food_factory()
    store = await CartStore.load(gateway, None)

    response = await OrderingAssistant(gateway, RuleBasedChatModel()).handle(store, "order a burger")

    assert response.alert == LOGIN_REQUIRED
    assert response.added_food_item_id is None


@pytest.mark.asyncio
async def test_general_questions_go_to_the_model(gateway):
    store = await CartStore.load(gateway, "user-1")
    assistant = OrderingAssistant(gateway, RuleBasedChatModel())

    greeting = await assistant.handle(store, "hello")
    delivery = await assistant.handle(store, "Do you deliver?")

    assert greeting.reply.startswith("Hello! 👋")
    assert greeting.order_intent is False
    assert "30-45 minutes" in delivery.reply


@pytest.mark.asyncio
async def test_unexpected_errors_become_friendly_reply(gateway):
    store = await CartStore.load(gateway, "user-1")

    response = await OrderingAssistant(gateway, BrokenModel()).handle(store, "what is on the menu")

    assert response.reply == TROUBLE_REPLY


# =============================================================================
# HUGGINGFACE MODEL
# =============================================================================

def hf_model(handler) -> HuggingFaceChatModel:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceChatModel(api_key="hf_test", model_url=MODEL_URL, client=client)


@pytest.mark.asyncio
async def test_huggingface_sends_transcript():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"generated_text": "We open at 10am."}])

    model = hf_model(handler)
    history = [
        ChatMessage(role="user", content="hi"),
        ChatMessage(role="assistant", content="Hello!"),
    ]

    assert await model.reply("When do you open?", history) == "We open at 10am."
    assert seen["auth"] == "Bearer hf_test"
    assert seen["body"] == {"inputs": {
        "past_user_inputs": ["hi"],
        "generated_responses": ["Hello!"],
        "text": "When do you open?",
    }}
    await model.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(503, json={"error": "Model is loading"}),
    httpx.Response(200, json={"generated_text": ""}),
    httpx.Response(200, text="not json"),
])
async def test_huggingface_falls_back_to_rules(response):
    model = hf_model(lambda request: response)

    reply = await model.reply("hello")

    assert reply == RuleBasedChatModel().respond("hello")


@pytest.mark.asyncio
async def test_huggingface_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    reply = await hf_model(handler).reply("help")

    assert reply.startswith("I'm here to help!")


# =============================================================================
# VOICE
# =============================================================================

@pytest.mark.asyncio
async def test_voice_interim_results_are_echoed(gateway):
    store = await CartStore.load(gateway, "user-1")
    handler = VoiceHandler(OrderingAssistant(gateway, RuleBasedChatModel()))

    response = await handler.handle(store, VoiceTranscript(transcript=" I want ", isFinal=False))

    assert response.transcript == "I want"
    assert response.chat is None


@pytest.mark.asyncio
async def test_voice_final_result_goes_through_chat(gateway, food_factory):
    await food_factory()
    store = await CartStore.load(gateway, "user-1")
    handler = VoiceHandler(OrderingAssistant(gateway, RuleBasedChatModel()))

    response = await handler.handle(store, VoiceTranscript(transcript="I want a burger", confidence=0.9, is_final=True))

    assert response.chat.added_food_item_id is not None
    assert store.item_count == 1


@pytest.mark.asyncio
async def test_voice_disabled(gateway):
    store = await CartStore.load(gateway, None)
    handler = VoiceHandler(OrderingAssistant(gateway, RuleBasedChatModel()), enabled=False)

    with pytest.raises(VoiceUnavailable):
        await handler.handle(store, VoiceTranscript(transcript="hi", is_final=True))


# =============================================================================
# ROUTES
# =============================================================================

def test_chat_route(client, customer, menu):
    headers = auth_headers(customer)

    response = client.post("/api/chat", json={"message": "I want a burger"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["added_food_item_id"] == menu["cheeseburger"]["id"]
    assert client.get("/api/cart", headers=headers).json()["item_count"] == 1

    anonymous = client.post("/api/chat", json={"message": "I want a burger"}).json()
    assert anonymous["alert"] == LOGIN_REQUIRED


def test_voice_route_disabled(client):
    client.app.dependency_overrides[get_settings] = lambda: Settings(voice_enabled=False)

    response = client.post("/api/chat/voice", json={"transcript": "hi", "isFinal": True})

    assert response.status_code == 501
    assert response.json()["detail"] == VOICE_UNSUPPORTED
