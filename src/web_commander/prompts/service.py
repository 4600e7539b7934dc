"""
Prompt Service - Templated completions for the command engine.

The single point of contact between the engine and the completion service:
load a template, render it, call the provider, and parse structured answers.
"""

import logging
from typing import Any, Dict, Optional

from web_commander.interfaces.llm import ILLMProvider, Message
from web_commander.prompts.schemas import LinkCandidate, parse_link_candidate
from web_commander.prompts.template import TemplateStore

logger = logging.getLogger(__name__)

BEST_LINK_TEMPLATE = "determine_best_link_url"
QUESTION_TEMPLATE = "page_command_question"
BEST_ANSWER_TEMPLATE = "overall_best_answer"
PLAN_TEMPLATE = "instructions_to_commands"
SUMMARY_TEMPLATE = "summarize_session"


class PromptService:
    """
    Runs prompt templates against a completion provider.
    
    Example:
        >>> service = PromptService(provider, TemplateStore())
        >>> answer = await service.complete("overall_best_answer", {
        ...     "question": "What is the price?",
        ...     "answers": "$10\\nunknown",
        ... })
    """
    
    def __init__(self, llm_provider: ILLMProvider, templates: Optional[TemplateStore] = None):
        """
        Initialize the service.
        
        Args:
            llm_provider: Completion provider
            templates: Template store (bundled templates by default)
        """
        self._llm = llm_provider
        self._templates = templates or TemplateStore()
        self._total_calls = 0
        self._total_tokens = 0
    
    @property
    def templates(self) -> TemplateStore:
        return self._templates
    
    def prompt_overhead(self, token: str, *extra: str) -> int:
        """
        Characters a prompt costs before its page content is added.
        
        Args:
            token: Template token
            *extra: Other strings that will be rendered into the prompt
            
        Returns:
            Length of the template text plus the extra strings
        """
        template = self._templates.load(token)
        return len(template.prompt) + sum(len(part) for part in extra)
    
    async def complete(self, token: str, params: Dict[str, Any]) -> str:
        """
        Render a template and return the completion text, stripped.
        
        Args:
            token: Template token
            params: Placeholder values
            
        Returns:
            The model's answer
            
        Raises:
            UnreplacedVariableError: If the template needs a missing parameter
            ServiceError: If the completion call fails
        """
        template = self._templates.load(token)
        prompt = template.render(params)
        
        logger.debug(f"Running template {token} ({len(prompt)} chars)")
        self._total_calls += 1
        
        response = await self._llm.complete(
            messages=[Message.user(prompt)],
            **template.sampling_options(),
        )
        self._total_tokens += response.usage.total_tokens if response.usage else 0
        
        return response.content.strip()
    
    async def determine_best_link(
        self,
        markup: str,
        description: str,
        history: str,
    ) -> Optional[LinkCandidate]:
        """
        Ask the model which link on a page best matches a description.
        
        Args:
            markup: Simplified page markup (one fragment)
            description: What the user wants to click
            history: Formatted last command/result, may be empty
            
        Returns:
            The parsed candidate, or None if the model picked nothing
            
        Raises:
            InvalidResponseError: If the answer is not the expected JSON
        """
        text = await self.complete(
            BEST_LINK_TEMPLATE,
            {
                "html": markup,
                "description": description,
                "history": history,
            },
        )
        return parse_link_candidate(text)
    
    def get_stats(self) -> Dict[str, Any]:
        """Get usage statistics."""
        return {
            "total_calls": self._total_calls,
            "total_tokens": self._total_tokens,
        }
