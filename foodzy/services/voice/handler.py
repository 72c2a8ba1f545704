"""
Voice Transcript Handler

The browser owns the microphone and speech recognition; it posts each
recognition result here. Interim results are echoed so the widget can
show what was heard so far. A final result is treated as a typed chat
message.
"""

import logging

from foodzy.schemas import VoiceResponse, VoiceTranscript
from foodzy.services.assistant import OrderingAssistant
from foodzy.services.cart import CartStore

logger = logging.getLogger(__name__)

VOICE_UNSUPPORTED = "Voice recognition is not supported in your browser"


class VoiceUnavailable(Exception):
    """Voice input is switched off for this deployment."""

    def __init__(self, message: str = VOICE_UNSUPPORTED):
        super().__init__(message)
        self.message = message


class VoiceHandler:
    """
    Routes speech-recognition results into the ordering assistant.

    Args:
        assistant: Assistant that handles final transcripts
        enabled: False answers every request with VoiceUnavailable
    """

    def __init__(self, assistant: OrderingAssistant, enabled: bool = True):
        self.assistant = assistant
        self.enabled = enabled

    async def handle(self, store: CartStore, result: VoiceTranscript) -> VoiceResponse:
        if not self.enabled:
            raise VoiceUnavailable()

        transcript = result.transcript.strip()
        if not result.is_final or not transcript:
            return VoiceResponse(transcript=transcript, is_final=result.is_final)

        logger.info(f"Voice transcript (confidence {result.confidence:.2f}): {transcript}")
        chat = await self.assistant.handle(store, transcript, result.history)
        return VoiceResponse(transcript=transcript, is_final=True, chat=chat)
