"""
Prompt Templates - YAML prompt files with ``{{slug}}`` placeholders.

Each template is a ``{token}.yaml`` file holding the sampling parameters for
the completion call and the prompt text:

    name: Determine best link
    description: Pick the anchor that best matches an intent.
    temperature: 0
    n: 1
    top_p: 1
    frequency_penalty: 0
    presence_penalty: 0
    max_tokens: 256
    stop: []
    prompt: |
      ...{{html}}...

Rendering fails with ``UnreplacedVariableError`` before anything is sent when a
placeholder has no value.
"""

import logging
import re
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from web_commander.exceptions.template import (
    TemplateNotFoundError,
    TemplateValidationError,
    UnreplacedVariableError,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

TEMPLATE_SUFFIX = ".yaml"


class PromptTemplate(BaseModel):
    """
    A parsed prompt template.
    
    Attributes:
        token: Unique short identifier, also the file name
        name: Human-readable name
        description: What the prompt is for
        model: Model override (None uses the provider default)
        temperature: Sampling temperature
        n: Number of completions requested
        top_p: Nucleus sampling mass
        frequency_penalty: Frequency penalty
        presence_penalty: Presence penalty
        max_tokens: Maximum completion tokens
        stop: Stop sequences
        prompt: Prompt text with ``{{slug}}`` placeholders
    """
    model_config = ConfigDict(extra="forbid", protected_namespaces=())
    
    token: str
    name: str
    description: str
    model: Optional[str] = None
    temperature: float = Field(ge=0.0, le=2.0)
    n: int = Field(ge=1)
    top_p: float = Field(ge=0.0, le=1.0)
    frequency_penalty: float = Field(ge=-2.0, le=2.0)
    presence_penalty: float = Field(ge=-2.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    stop: List[str]
    prompt: str = Field(min_length=1)
    
    @property
    def variables(self) -> List[str]:
        """Placeholder names in order of first appearance."""
        seen: List[str] = []
        for name in PLACEHOLDER_PATTERN.findall(self.prompt):
            if name not in seen:
                seen.append(name)
        return seen
    
    def render(self, params: Dict[str, Any]) -> str:
        """
        Replace every ``{{slug}}`` with its value.
        
        Substitution is a single pass, so values containing braces are
        inserted verbatim and never re-scanned.
        
        Args:
            params: Placeholder values (converted with ``str``)
            
        Returns:
            The ready prompt, stripped
            
        Raises:
            UnreplacedVariableError: If a placeholder has no value
        """
        values = {str(key): value for key, value in params.items()}
        missing = [name for name in self.variables if name not in values]
        if missing:
            raise UnreplacedVariableError(missing, token=self.token)
        
        rendered = PLACEHOLDER_PATTERN.sub(lambda m: str(values[m.group(1)]), self.prompt)
        return rendered.strip()
    
    def sampling_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``ILLMProvider.complete``."""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
            "n": self.n,
            "frequency_penalty": self.frequency_penalty,
            "presence_penalty": self.presence_penalty,
            "stop": self.stop or None,
        }


class TemplateStore:
    """
    Loads and caches prompt templates from a directory.
    
    Without a directory the templates bundled with the package are used.
    
    Example:
        >>> store = TemplateStore()
        >>> template = store.load("determine_best_link_url")
        >>> prompt = template.render({"html": "...", "description": "login", "history": ""})
    """
    
    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Initialize the store.
        
        Args:
            directory: Directory holding ``{token}.yaml`` files
        """
        if directory is None:
            self._directory = Path(str(resources.files("web_commander.prompts") / "templates"))
        else:
            self._directory = Path(directory)
        self._cache: Dict[str, PromptTemplate] = {}
    
    @property
    def directory(self) -> Path:
        return self._directory
    
    def tokens(self) -> List[str]:
        """All template tokens available in the directory, sorted."""
        if not self._directory.is_dir():
            return []
        return sorted(path.stem for path in self._directory.glob(f"*{TEMPLATE_SUFFIX}"))
    
    def load(self, token: str) -> PromptTemplate:
        """
        Load a template by token.
        
        Args:
            token: Template identifier (file name without suffix)
            
        Returns:
            The parsed template
            
        Raises:
            TemplateNotFoundError: If no file exists for the token
            TemplateValidationError: If the file is not a valid template
        """
        if not token:
            raise TemplateValidationError("No token provided")
        
        cached = self._cache.get(token)
        if cached is not None:
            return cached
        
        path = self._directory / f"{token}{TEMPLATE_SUFFIX}"
        if not path.is_file():
            raise TemplateNotFoundError(token, str(path))
        
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise TemplateValidationError(f"Template {path.name}: invalid YAML: {e}", token=token)
        
        if not isinstance(data, dict):
            raise TemplateValidationError(f"Template {path.name}: expected a mapping", token=token)
        
        data.setdefault("token", token)
        try:
            template = PromptTemplate(**data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise TemplateValidationError(f"Template {path.name}: {problems}", token=token)
        
        logger.debug(f"Loaded template {token} ({len(template.prompt)} chars)")
        self._cache[token] = template
        return template
    
    def validate_all(self) -> List[PromptTemplate]:
        """
        Load every template in the directory.
        
        Returns:
            All templates, sorted by token
            
        Raises:
            TemplateValidationError: Listing every broken template at once
        """
        templates: List[PromptTemplate] = []
        errors: List[str] = []
        for token in self.tokens():
            try:
                templates.append(self.load(token))
            except TemplateValidationError as e:
                errors.append(e.message)
        if errors:
            raise TemplateValidationError("\n".join(errors))
        return templates
