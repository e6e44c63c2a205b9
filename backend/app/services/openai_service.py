"""
LoveStack Backend — OpenAI Chat Service
=========================================

What:  ChatService implementation backed by OpenAI chat completions.
How:   One `AsyncOpenAI.chat.completions.create()` call per message with a
       fixed system prompt and SDK retries disabled. Upstream non-2xx
       answers are relayed with their status code; connection failures
       become a 500.
"""

import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from app.exceptions import ExternalServiceError
from app.services.llm_base import ChatService

logger = logging.getLogger(__name__)


class OpenAIChatService(ChatService):

    SYSTEM_PROMPT = "You are a helpful assistant."

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 256,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 15.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client
        self._client: Optional[AsyncOpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    async def reply(self, message: str) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
                max_tokens=self.max_tokens,
            )
        except openai.APIStatusError as e:
            logger.warning("OpenAI answered %d: %s", e.status_code, e.response.text)
            # Relay the upstream body as the error string
            raise ExternalServiceError(message=e.response.text, status_code=e.status_code)
        except openai.APIError as e:
            logger.error("OpenAI request failed: %s", str(e))
            raise ExternalServiceError(message="Failed to contact OpenAI.")

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
