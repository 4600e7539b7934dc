"""
OpenAI-compatible LLM Provider.

Supports any OpenAI-compatible chat completions API including:
- OpenAI
- Azure OpenAI
- Local servers (LM Studio, Ollama, etc.)
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from web_commander.exceptions.service import (
    InvalidResponseError,
    RateLimitError,
    ServiceAuthenticationError,
    ServiceConnectionError,
)
from web_commander.interfaces.llm import (
    ILLMProvider,
    Message,
    MessageRole,
    LLMResponse,
    Usage,
)

logger = logging.getLogger(__name__)


class OpenAIProvider(ILLMProvider):
    """
    OpenAI-compatible LLM provider.
    
    Every transport or protocol failure is raised as a ``ServiceError``
    subclass; nothing is retried here.
    
    Example:
        >>> provider = OpenAIProvider(
        ...     base_url="https://api.openai.com",
        ...     model="gpt-4o-mini",
        ...     api_key="sk-...",
        ... )
        >>> response = await provider.complete([
        ...     Message.user("Hello!")
        ... ])
    """
    
    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str,
        timeout: float = 60.0,
    ):
        """
        Initialize the provider.
        
        Args:
            base_url: Base URL for the API (no /v1 suffix needed)
            model: Model to use for completions
            api_key: API key sent as a bearer token
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )
    
    @property
    def name(self) -> str:
        return "openai"
    
    @property
    def default_model(self) -> str:
        return self._model
    
    async def complete(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion."""
        model = model or self._model
        
        body: Dict[str, Any] = {
            "model": model,
            "messages": [
                {
                    "role": msg.role.value if isinstance(msg.role, MessageRole) else msg.role,
                    "content": msg.content,
                }
                for msg in messages
            ],
            "temperature": temperature,
        }
        
        if max_tokens:
            body["max_tokens"] = max_tokens
        
        # Drop unset sampling options so servers apply their own defaults
        body.update({key: value for key, value in kwargs.items() if value is not None})
        
        logger.debug(f"Calling completion API: {model}")
        
        try:
            response = await self._client.post(
                "/v1/chat/completions",
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Error calling completion API: {e}")
            raise ServiceConnectionError(f"Could not reach {self._base_url}: {e}")
        
        if response.status_code in (401, 403):
            raise ServiceAuthenticationError(
                f"Completion API rejected the credentials ({response.status_code})"
            )
        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise RateLimitError(
                "Completion API rate limit exceeded",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.is_error:
            logger.error(f"HTTP error: {response.status_code} - {response.text}")
            raise ServiceConnectionError(
                f"Completion API returned {response.status_code}",
                {"body": response.text[:500]},
            )
        
        try:
            data = response.json()
            choice = data["choices"][0]
            content = choice["message"].get("content") or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InvalidResponseError(f"Malformed completion response: {e}", raw_response=response.text)
        
        usage_data = data.get("usage") or {}
        usage = Usage(
            prompt_tokens=usage_data.get("prompt_tokens", 0),
            completion_tokens=usage_data.get("completion_tokens", 0),
            total_tokens=usage_data.get("total_tokens", 0),
        )
        
        return LLMResponse(
            content=content,
            model=data.get("model", model),
            usage=usage,
            finish_reason=choice.get("finish_reason") or "stop",
            raw_response=data,
        )
    
    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
