"""
LoveStack Backend — Chat Tests
================================

What we test:
    ✅ Reply text is extracted from the first choice
    ✅ 400 without a message, 500 without an API key
    ✅ Upstream status and body are relayed on failure
    ✅ Transport failure is a 500 with a fixed message
"""

import json

import httpx
import pytest

from app.exceptions import ExternalServiceError
from app.services.openai_service import OpenAIChatService

from conftest import ProviderStub, raise_connect_error

COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "gpt-3.5-turbo",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello there!"},
            "finish_reason": "stop",
        }
    ],
}


def service_over(stub: ProviderStub) -> OpenAIChatService:
    return OpenAIChatService(api_key="sk-test", http_client=httpx.AsyncClient(transport=stub.transport()))


class TestChatRoute:

    @pytest.mark.asyncio
    async def test_reply(self, test_client, openai_stub):
        openai_stub.add("POST", "/v1/chat/completions", json=COMPLETION)

        response = await test_client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 200
        assert response.json() == {"reply": "Hello there!"}
        payload = json.loads(openai_stub.requests[0].content)
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["max_tokens"] == 256
        assert payload["messages"][0] == {"role": "system", "content": "You are a helpful assistant."}
        assert payload["messages"][1] == {"role": "user", "content": "Hi"}

    @pytest.mark.asyncio
    async def test_missing_message_is_400(self, test_client, openai_stub):
        response = await test_client.post("/api/chat", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "No message provided."}
        assert openai_stub.requests == []

    @pytest.mark.asyncio
    async def test_missing_api_key_is_500(self, test_client, container, openai_stub):
        container.chat.api_key = ""

        response = await test_client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key not configured."}
        assert openai_stub.requests == []

    @pytest.mark.asyncio
    async def test_upstream_error_is_relayed(self, test_client, openai_stub):
        openai_stub.add("POST", "/v1/chat/completions", status=429, json={"error": {"message": "Rate limit"}})

        response = await test_client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 429
        assert "Rate limit" in response.json()["error"]


class TestOpenAIChatService:

    @pytest.mark.asyncio
    async def test_empty_choices_yield_empty_reply(self):
        stub = ProviderStub().add("POST", "/v1/chat/completions", json={**COMPLETION, "choices": []})
        service = service_over(stub)

        assert await service.reply("Hi") == ""

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        stub = ProviderStub().add("POST", "/v1/chat/completions", handler=raise_connect_error)
        service = service_over(stub)

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.reply("Hi")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to contact OpenAI."

    @pytest.mark.asyncio
    async def test_requests_are_not_retried(self):
        stub = ProviderStub().add("POST", "/v1/chat/completions", status=503, json={"error": {"message": "busy"}})
        service = service_over(stub)

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.reply("Hi")

        assert exc_info.value.status_code == 503
        assert len(stub.requests) == 1
        assert stub.requests[0].headers["Authorization"] == "Bearer sk-test"
