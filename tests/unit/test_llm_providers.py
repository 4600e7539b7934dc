"""
Tests for the LLM providers.
"""

import json

import httpx
import pytest

from web_commander.exceptions import (
    InvalidResponseError,
    RateLimitError,
    ServiceAuthenticationError,
    ServiceConnectionError,
)
from web_commander.interfaces.llm import Message


def completion_body(content="Hello!", model="gpt-4"):
    return {
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
    }


class TestOpenAIProvider:
    """Test the OpenAI LLM provider."""

    @pytest.fixture
    def provider(self):
        """Create an OpenAI provider instance."""
        from web_commander.llm.openai_provider import OpenAIProvider
        return OpenAIProvider(
            base_url="http://127.0.0.1:3030/",
            model="gpt-4",
            api_key="sk-test",
        )

    @pytest.fixture
    def requests(self):
        """Requests seen by the mocked transport."""
        return []

    def respond(self, provider, requests, response):
        """Route the provider's client through a mock transport."""
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if isinstance(response, Exception):
                raise response
            return response

        provider._client = httpx.AsyncClient(
            base_url="http://127.0.0.1:3030",
            headers={"Authorization": "Bearer sk-test"},
            transport=httpx.MockTransport(handler),
        )

    def test_name_property(self, provider):
        """Test name property returns correct value."""
        assert provider.name == "openai"

    def test_default_model_property(self, provider):
        """Test default_model returns configured model."""
        assert provider.default_model == "gpt-4"

    @pytest.mark.asyncio
    async def test_complete(self, provider, requests):
        """Test a successful completion."""
        self.respond(provider, requests, httpx.Response(200, json=completion_body()))

        response = await provider.complete([Message.user("Hi")], temperature=0, max_tokens=16)

        assert response.content == "Hello!"
        assert response.model == "gpt-4"
        assert response.usage.total_tokens == 12
        assert response.finish_reason == "stop"

        (request,) = requests
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body == {
            "model": "gpt-4",
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0,
            "max_tokens": 16,
        }

    @pytest.mark.asyncio
    async def test_unset_options_dropped(self, provider, requests):
        """Test None sampling options are not sent."""
        self.respond(provider, requests, httpx.Response(200, json=completion_body()))

        await provider.complete(
            [Message.user("Hi")],
            model="gpt-4o",
            top_p=1,
            stop=None,
            n=1,
        )

        body = json.loads(requests[0].content)
        assert body["model"] == "gpt-4o"
        assert body["top_p"] == 1
        assert body["n"] == 1
        assert "stop" not in body
        assert "max_tokens" not in body

    @pytest.mark.asyncio
    async def test_null_content(self, provider, requests):
        """Test a null message content becomes an empty string."""
        self.respond(provider, requests, httpx.Response(200, json=completion_body(content=None)))

        response = await provider.complete([Message.user("Hi")])

        assert response.content == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_authentication_error(self, provider, requests, status):
        """Test rejected credentials."""
        self.respond(provider, requests, httpx.Response(status, json={"error": "bad key"}))

        with pytest.raises(ServiceAuthenticationError):
            await provider.complete([Message.user("Hi")])

    @pytest.mark.asyncio
    async def test_rate_limit(self, provider, requests):
        """Test rate limiting carries the retry delay."""
        self.respond(provider, requests, httpx.Response(429, headers={"retry-after": "7"}))

        with pytest.raises(RateLimitError) as exc_info:
            await provider.complete([Message.user("Hi")])
        assert exc_info.value.retry_after == 7
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_server_error(self, provider, requests):
        """Test error statuses are connection errors."""
        self.respond(provider, requests, httpx.Response(500, text="upstream down"))

        with pytest.raises(ServiceConnectionError) as exc_info:
            await provider.complete([Message.user("Hi")])
        assert exc_info.value.details["body"] == "upstream down"

    @pytest.mark.asyncio
    async def test_transport_error(self, provider, requests):
        """Test unreachable servers are connection errors."""
        self.respond(provider, requests, httpx.ConnectError("refused"))

        with pytest.raises(ServiceConnectionError, match="127.0.0.1:3030"):
            await provider.complete([Message.user("Hi")])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"model": "gpt-4"}),
    ])
    async def test_malformed_response(self, provider, requests, response):
        """Test unexpected bodies are invalid responses."""
        self.respond(provider, requests, response)

        with pytest.raises(InvalidResponseError):
            await provider.complete([Message.user("Hi")])

    @pytest.mark.asyncio
    async def test_close(self, provider, requests):
        """Test close releases the client."""
        self.respond(provider, requests, httpx.Response(200, json=completion_body()))

        await provider.close()

        assert provider._client.is_closed
