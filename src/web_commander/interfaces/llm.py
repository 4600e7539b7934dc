"""
LLM Provider Interface - Abstract base classes for completion services.

Example:
    >>> from web_commander.llm import OpenAIProvider
    >>> provider = OpenAIProvider(base_url="https://api.openai.com", model="gpt-4o-mini", api_key="sk-...")
    >>> response = await provider.complete([Message.user("Hello")])
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class MessageRole(Enum):
    """Role of a message in the conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """
    A message in the LLM conversation.
    
    Attributes:
        role: The role of the message sender
        content: The text content of the message
    """
    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER, content=content)


@dataclass
class Usage:
    """
    Token usage information from an LLM response.
    
    Attributes:
        prompt_tokens: Number of tokens in the prompt
        completion_tokens: Number of tokens in the completion
        total_tokens: Total tokens used
    """
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class LLMResponse:
    """
    Response from an LLM completion request.
    
    Attributes:
        content: The text content of the response
        model: The model that generated the response
        usage: Token usage information
        finish_reason: Reason the completion finished ('stop', 'length')
        raw_response: The original response body from the provider
    """
    content: str
    model: str
    usage: Usage
    finish_reason: str = "stop"
    raw_response: Any = None


class ILLMProvider(ABC):
    """
    Abstract interface for completion services.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'openai')."""
        ...

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when a request does not name one."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: List[Message],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Generate a completion for the given messages.
        
        Args:
            messages: List of messages in the conversation
            model: Model to use (defaults to provider's default model)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the response
            **kwargs: Provider-specific options (top_p, stop, ...)
            
        Returns:
            The LLM's response
            
        Raises:
            ServiceError: If the request fails
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        ...
