"""
Chat Model Abstract Base Class

A chat model turns the latest user message plus the visible transcript
into one reply. Implementations never raise for provider problems; they
degrade to a local answer instead.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from foodzy.schemas import ChatMessage


class BaseChatModel(ABC):
    """Abstract base class for chat models."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def reply(self, message: str, history: Sequence[ChatMessage] = ()) -> str:
        """Generate a reply to ``message`` given the prior transcript."""
        pass

    async def aclose(self) -> None:
        """Release network resources, if any."""
