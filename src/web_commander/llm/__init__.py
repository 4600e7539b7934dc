"""
LLM Providers - Concrete implementations of the completion service interface.
"""

from web_commander.llm.openai_provider import OpenAIProvider

__all__ = [
    "OpenAIProvider",
]
