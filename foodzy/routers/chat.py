"""
Chat and Voice Ordering

Anonymous visitors may chat; an order request from them gets the
"Please login" alert instead of a cart change.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from foodzy.routers.deps import get_assistant, get_optional_cart_store, get_voice_handler
from foodzy.schemas import ChatRequest, ChatResponse, ErrorResponse, VoiceResponse, VoiceTranscript
from foodzy.services.assistant import OrderingAssistant
from foodzy.services.cart import CartStore
from foodzy.services.voice import VoiceHandler, VoiceUnavailable

router = APIRouter(prefix="/api/chat", tags=["Chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    store: CartStore = Depends(get_optional_cart_store),
    assistant: OrderingAssistant = Depends(get_assistant),
) -> ChatResponse:
    return await assistant.handle(store, data.message, data.history)


@router.post("/voice", response_model=VoiceResponse, responses={501: {"model": ErrorResponse}})
async def voice(
    data: VoiceTranscript,
    store: CartStore = Depends(get_optional_cart_store),
    handler: VoiceHandler = Depends(get_voice_handler),
) -> VoiceResponse:
    """Speech-recognition result from the browser."""
    try:
        return await handler.handle(store, data)
    except VoiceUnavailable as e:
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=e.message)
