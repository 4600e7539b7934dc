"""
Prompts module - Prompt templates and the service that runs them.
"""

from web_commander.prompts.schemas import LinkCandidate, parse_link_candidate
from web_commander.prompts.service import PromptService
from web_commander.prompts.template import PromptTemplate, TemplateStore

__all__ = [
    "LinkCandidate",
    "parse_link_candidate",
    "PromptService",
    "PromptTemplate",
    "TemplateStore",
]
