"""
LoveStack Backend — Abstract Chat Service Interface
=====================================================

What:  Abstract base class for the site's chat assistant backend.
Why:   The chat route should not care which provider answers. Tests swap in
       a fake; production uses OpenAIChatService.
How:   Concrete implementations inherit from ChatService and implement reply().
Who:   Called by POST /api/chat.
"""

from abc import ABC, abstractmethod


class ChatService(ABC):
    """
    Contract:
        - reply() accepts one user message and returns the assistant's text
        - Implementations translate provider failures into ExternalServiceError
        - No retries; one provider call per user message
    """

    @property
    @abstractmethod
    def configured(self) -> bool:
        """False when the provider credential is missing."""
        ...

    @abstractmethod
    async def reply(self, message: str) -> str:
        """
        Return the assistant's answer to a single user message.

        Returns:
            The reply text. Empty string if the provider produced no content.

        Raises:
            ExternalServiceError: provider answered non-2xx (status relayed)
                or could not be reached (500).
        """
        ...

    async def aclose(self) -> None:
        return None
